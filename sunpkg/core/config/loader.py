"""
Configuration loader — reads sunpkg.yml into domain models.

The manifest names the backend tool paths and the desired state of
each managed package. It reads YAML, validates against Pydantic
schemas, and returns typed objects.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from sunpkg.core.models.package import DesiredState

logger = logging.getLogger(__name__)

# Default config filename
MANIFEST_FILE = "sunpkg.yml"


class ConfigError(Exception):
    """Raised when the manifest is invalid or missing."""


class ToolPaths(BaseModel):
    """Where the SVR4 packaging tools live."""

    pkginfo: str = "/usr/bin/pkginfo"
    pkgadd: str = "/usr/sbin/pkgadd"
    pkgrm: str = "/usr/sbin/pkgrm"


class Manifest(BaseModel):
    """Root manifest — loaded from sunpkg.yml."""

    tools: ToolPaths = Field(default_factory=ToolPaths)
    packages: list[DesiredState] = Field(default_factory=list)

    @field_validator("packages")
    @classmethod
    def _unique_names(cls, packages: list[DesiredState]) -> list[DesiredState]:
        seen: set[str] = set()
        for pkg in packages:
            if pkg.name in seen:
                raise ValueError(f"package {pkg.name} is declared more than once")
            seen.add(pkg.name)
        return packages

    def get_package(self, name: str) -> DesiredState | None:
        """Look up a package entry by name."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None


def find_manifest_file(start_dir: Path | None = None) -> Path | None:
    """Search for sunpkg.yml starting from the given directory, walking up.

    Returns:
        Path to sunpkg.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / MANIFEST_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_manifest(path: Path | None = None) -> Manifest:
    """Load and validate the package manifest.

    Args:
        path: Explicit path to sunpkg.yml. If None, searches upward.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_manifest_file()

    if path is None:
        raise ConfigError(f"No {MANIFEST_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        data["packages"] = _apply_defaults(data.get("defaults"), data.get("packages"))
        data.pop("defaults", None)
        manifest = Manifest.model_validate(data)
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid manifest {path}: {e}") from e

    logger.info("Loaded manifest with %d packages", len(manifest.packages))
    return manifest


def _apply_defaults(defaults: Any, packages: Any) -> list[dict[str, Any]]:
    """Merge ``defaults`` under every package entry; entry keys win."""
    if packages is None:
        return []
    if not isinstance(packages, list):
        raise TypeError("'packages' must be a list")
    if defaults is None:
        defaults = {}
    if not isinstance(defaults, dict):
        raise TypeError("'defaults' must be a mapping")

    merged = []
    for entry in packages:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            raise TypeError(f"package entry must be a mapping, got {type(entry).__name__}")
        merged.append({**defaults, **entry})
    return merged
