"""
pkgadd / pkgrm argument assembly.

The tools expect their flags in a fixed order:

    pkgadd [-a admin] [-r response] [-d source] [options] -n name
    pkgrm  [-a admin] -n name
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sunpkg.core.models.package import DesiredState


@dataclass(frozen=True)
class CommandOptions:
    """Which optional arguments apply to one operation."""

    adminfile: bool = False
    responsefile: bool = False
    source: bool = False
    cmd_options: bool = False


INSTALL_OPTIONS = CommandOptions(adminfile=True, responsefile=True, source=True, cmd_options=True)
UNINSTALL_OPTIONS = CommandOptions(adminfile=True)


def build_command(desired: DesiredState, options: CommandOptions) -> list[str]:
    """Argument vector (without the program) for one pkgadd/pkgrm run."""
    cmd: list[str] = []
    if options.adminfile and desired.adminfile:
        cmd += ["-a", desired.adminfile]
    if options.responsefile and desired.responsefile:
        cmd += ["-r", desired.responsefile]
    if options.source and desired.source:
        cmd += ["-d", desired.source]
    if options.cmd_options and desired.install_options:
        cmd += join_options(desired.install_options)
    cmd += ["-n", desired.name]
    return cmd


def join_options(options: str | list[str | dict[str, Any]]) -> list[str]:
    """Flatten install_options; mappings become ``key=value`` words."""
    if isinstance(options, str):
        return [options]

    words: list[str] = []
    for opt in options:
        if isinstance(opt, dict):
            words += [f"{k}={v}" for k, v in opt.items()]
        else:
            words.append(str(opt))
    return words
