"""
Domain models — Pydantic types for package management.

All models are re-exported here for convenient access:

    from sunpkg.core.models import Action, Receipt, PackageRecord, DesiredState
"""

from sunpkg.core.models.action import Action, Receipt
from sunpkg.core.models.package import (
    ABSENT,
    LATEST,
    PRESENT,
    Absent,
    DesiredState,
    Found,
    PackageRecord,
    QueryFailed,
    QueryResult,
)

__all__ = [
    "ABSENT",
    "LATEST",
    "PRESENT",
    # package.py
    "Absent",
    # action.py
    "Action",
    "DesiredState",
    "Found",
    "PackageRecord",
    "QueryFailed",
    "QueryResult",
    "Receipt",
]
