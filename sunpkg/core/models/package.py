"""
Package models — observed records, desired state, and query results.

PackageRecord is what ``pkginfo -l`` tells us about one package.
DesiredState is what the caller wants. QueryResult is the three-way
answer of a single-package query: Found, Absent, or QueryFailed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ── Ensure vocabulary ───────────────────────────────────────────

ABSENT = "absent"
PRESENT = "present"
LATEST = "latest"

# Aliases accepted on input and folded into PRESENT
_PRESENT_ALIASES = frozenset({"present", "installed"})

PROVIDER_NAME = "sun"


class PackageRecord(BaseModel):
    """One package's entry in the package database.

    Attributes the backend did not report stay ``None`` ("unknown"),
    never an empty string. Records are immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    ensure: str | None = None        # installed version, or "absent"
    category: str | None = None
    platform: str | None = None
    root: str | None = None          # BASEDIR
    vendor: str | None = None
    description: str | None = None
    provider: str = PROVIDER_NAME

    def to_dict(self) -> dict[str, str]:
        """Known attributes only."""
        return self.model_dump(exclude_none=True)


InstallOptions = str | list[str | dict[str, Any]]


class DesiredState(BaseModel):
    """Caller-supplied target configuration for one package."""

    name: str
    ensure: str = PRESENT
    source: str | None = None
    adminfile: str | None = None
    responsefile: str | None = None
    install_options: InstallOptions | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("package name must not be empty")
        return value

    @field_validator("ensure", mode="before")
    @classmethod
    def _normalise_ensure(cls, value: Any) -> str:
        if value is None:
            raise ValueError("ensure must not be empty")
        # YAML reads an unquoted 1.10 as the float 1.1
        if isinstance(value, float):
            raise ValueError(f"version {value!r} must be quoted to keep its digits")
        text = str(value).strip()
        if not text:
            raise ValueError("ensure must not be empty")
        if text.lower() in _PRESENT_ALIASES:
            return PRESENT
        if text.lower() in (ABSENT, LATEST):
            return text.lower()
        return text

    @property
    def wants_version(self) -> bool:
        """Whether ensure names a specific version."""
        return self.ensure not in (ABSENT, PRESENT, LATEST)


# ═══════════════════════════════════════════════════════════════════
#  Query results
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Found:
    """The package is present; its record is attached."""

    record: PackageRecord

    @property
    def ensure(self) -> str:
        return self.record.ensure or PRESENT


@dataclass(frozen=True)
class Absent:
    """The backend positively reported the package as not installed."""

    @property
    def ensure(self) -> str:
        return ABSENT


@dataclass(frozen=True)
class QueryFailed:
    """The query itself failed. Never to be read as "absent"."""

    message: str


QueryResult = Found | Absent | QueryFailed
