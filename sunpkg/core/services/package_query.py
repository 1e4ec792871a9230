"""
Package state queries — what is installed, and what a source offers.

Two entry points over ``pkginfo -l``:

    instances()        every installed package; invocation failure is fatal
    info(name, device) one package, classified as Found / Absent / QueryFailed

``query`` and ``latest`` wrap ``info`` for the reconciler and turn
``QueryFailed`` into a ``QueryFailure`` exception.
"""

from __future__ import annotations

import logging
import re

from sunpkg.core.errors import QueryFailure
from sunpkg.core.models.package import (
    Absent,
    Found,
    PackageRecord,
    QueryFailed,
    QueryResult,
)
from sunpkg.core.services.package_commands import PackageCommands
from sunpkg.core.services.pkginfo import namemap, parse_pkginfo

logger = logging.getLogger(__name__)

NO_MESSAGE = "No message"


class PackageQuery:
    """Reads package state through ``pkginfo``."""

    def __init__(self, commands: PackageCommands):
        self.commands = commands

    def instances(self) -> list[PackageRecord]:
        """List every installed package."""
        output = self.commands.pkginfo(["-l"])
        records = []
        for block in parse_pkginfo(output):
            fields = namemap(block)
            if "name" not in fields:
                logger.debug("Skipping pkginfo block without PKGINST: %s", block)
                continue
            records.append(PackageRecord(**fields))
        logger.info("Found %d installed packages", len(records))
        return records

    def info(self, name: str, device: str | None = None) -> QueryResult:
        """Query one package, optionally at a device or package file.

        pkginfo exits nonzero for unknown packages, so the exit code is
        ignored and the printed ``ERROR:`` line decides the outcome.
        """
        args = ["-l"]
        if device:
            args += ["-d", device]
        args.append(name)

        target = f"{name}@{device}" if device else name
        output = self.commands.pkginfo(args, target=target, fail_on_nonzero=False)
        blocks = parse_pkginfo(output)

        if not blocks:
            return QueryFailed(NO_MESSAGE)
        if len(blocks) > 1:
            # Several instances (e.g. SUNWfoo, SUNWfoo.2) answer to one name
            logger.warning(
                "pkginfo returned %d entries for %s; using the first (%s)",
                len(blocks), name, blocks[0].get("PKGINST", "?"),
            )
        block = blocks[0]

        error = block.get("ERROR")
        if error is not None and len(blocks) == 1:
            if re.search(rf'information for (?:package )?"{re.escape(name)}"', error):
                return Absent()
            return QueryFailed(error)

        fields = namemap(block)
        if "name" not in fields:
            return QueryFailed(f"pkginfo output for {name} has no PKGINST field")
        return Found(PackageRecord(**fields))

    def query(self, name: str, device: str | None = None) -> Found | Absent:
        """Installed state of ``name`` (or its state at ``device``).

        Raises:
            QueryFailure: pkginfo reported an error other than "not installed".
        """
        return self._checked(name, self.info(name, device=device))

    def latest(self, name: str, source: str) -> str | None:
        """Version of ``name`` available at ``source``, None if not there."""
        result = self.query(name, device=source)
        if isinstance(result, Found):
            return result.record.ensure
        return None

    @staticmethod
    def _checked(name: str, result: QueryResult) -> Found | Absent:
        if isinstance(result, QueryFailed):
            raise QueryFailure(name, result.message)
        return result
