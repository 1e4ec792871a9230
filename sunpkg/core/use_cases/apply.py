"""
Apply use case — reconcile every package declared in sunpkg.yml.

Packages are reconciled one after another and independently: a
failure on one package is recorded and the run moves on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sunpkg.adapters.registry import AdapterRegistry
from sunpkg.core.config.loader import MANIFEST_FILE, ConfigError, load_manifest
from sunpkg.core.errors import PackageError
from sunpkg.core.services.package_commands import PackageCommands
from sunpkg.core.services.package_query import PackageQuery
from sunpkg.core.services.reconciler import Reconciler, ReconcileResult

logger = logging.getLogger(__name__)


@dataclass
class PackageOutcome:
    """Result or error for one manifest entry."""

    name: str
    result: ReconcileResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.result is None:
            return {"name": self.name, "status": "failed", "error": self.error}
        return {"status": "ok", **self.result.to_dict()}


@dataclass
class ApplyResult:
    """Result of applying a manifest."""

    outcomes: list[PackageOutcome] = field(default_factory=list)
    dry_run: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def changed(self) -> int:
        return sum(1 for o in self.outcomes if o.result and o.result.changed)

    @property
    def status(self) -> str:
        """ok, partial, or failed."""
        if self.error or (self.outcomes and self.succeeded == 0):
            return "failed"
        if self.failed:
            return "partial"
        return "ok"

    def to_dict(self) -> dict:
        if self.error:
            return {"status": "failed", "error": self.error}
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "total": len(self.outcomes),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "changed": self.changed,
            "packages": [o.to_dict() for o in self.outcomes],
        }


def apply_manifest(
    registry: AdapterRegistry,
    config_path: Path | None = None,
    dry_run: bool = False,
    only: list[str] | None = None,
) -> ApplyResult:
    """Reconcile the packages of a manifest.

    Args:
        registry: Adapter registry used to run the backend tools.
        config_path: Explicit sunpkg.yml (default: search upward).
        dry_run: Query real state but skip pkgadd/pkgrm.
        only: Restrict the run to these package names.
    """
    result = ApplyResult(dry_run=dry_run)

    try:
        manifest = load_manifest(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    commands = PackageCommands(registry, tools=manifest.tools, dry_run=dry_run)
    reconciler = Reconciler(PackageQuery(commands), commands)

    names = only or [p.name for p in manifest.packages]

    for name in names:
        outcome = PackageOutcome(name=name)
        desired = manifest.get_package(name)
        if desired is None:
            outcome.error = f"Package {name} is not declared in {MANIFEST_FILE}"
        else:
            try:
                outcome.result = reconciler.reconcile(desired)
            except PackageError as e:
                logger.error("%s: %s", name, e)
                outcome.error = str(e)
        result.outcomes.append(outcome)

    logger.info(
        "Applied %d packages: %d ok, %d failed, %d changed",
        len(result.outcomes), result.succeeded, result.failed, result.changed,
    )
    return result
