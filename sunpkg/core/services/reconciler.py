"""
Reconciler — bring one package's actual state in line with its desired state.

Transitions (current state read live from pkginfo):

    ensure     current        action
    ─────────  ─────────────  ─────────────────────────────────────
    present    absent         install
    present    any version    none
    <version>  absent         install
    <version>  same version   none
    <version>  other version  update
    latest     absent         install
    latest     version v      update if the source offers != v
    absent     installed      uninstall
    absent     absent         none

SVR4 has no upgrade verb, so ``update`` is pkgrm followed by pkgadd.
It is best-effort and not atomic: if pkgadd fails after pkgrm
succeeded, the package is left absent and PartialUpdateFailure is
raised. Nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from sunpkg.core.errors import ConfigurationError, InvocationFailure, PartialUpdateFailure
from sunpkg.core.models.package import ABSENT, LATEST, PRESENT, Absent, DesiredState
from sunpkg.core.services.command_builder import (
    INSTALL_OPTIONS,
    UNINSTALL_OPTIONS,
    build_command,
)
from sunpkg.core.services.package_commands import PackageCommands
from sunpkg.core.services.package_query import PackageQuery

logger = logging.getLogger(__name__)

ReconcileAction = Literal["none", "install", "uninstall", "update"]


@dataclass
class ReconcileResult:
    """Outcome of reconciling one package."""

    name: str
    action: ReconcileAction = "none"
    previous: str = ABSENT
    current: str = ABSENT
    commands: list[list[str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return self.action != "none"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "action": self.action,
            "previous": self.previous,
            "current": self.current,
            "changed": self.changed,
            "dry_run": self.dry_run,
            "commands": self.commands,
        }


class Reconciler:
    """Drives pkgadd/pkgrm from desired state."""

    def __init__(self, query: PackageQuery, commands: PackageCommands):
        self.query = query
        self.commands = commands

    # ── Primitive operations ────────────────────────────────────

    def install(self, desired: DesiredState) -> list[str]:
        """Run pkgadd; returns the argument vector used."""
        self._require_source(desired)
        args = build_command(desired, INSTALL_OPTIONS)
        logger.info("Installing %s from %s", desired.name, desired.source)
        self.commands.pkgadd(args, desired.name)
        return [self.commands.tools.pkgadd, *args]

    def uninstall(self, desired: DesiredState) -> list[str]:
        """Run pkgrm; returns the argument vector used."""
        args = build_command(desired, UNINSTALL_OPTIONS)
        logger.info("Removing %s", desired.name)
        self.commands.pkgrm(args, desired.name)
        return [self.commands.tools.pkgrm, *args]

    def update(self, desired: DesiredState) -> list[list[str]]:
        """Remove the installed package (if still there), then install.

        The installed state is re-read here rather than trusted from an
        earlier query, since it may have changed in between.
        """
        self._require_source(desired)
        ran: list[list[str]] = []

        removed = False
        if not isinstance(self.query.query(desired.name), Absent):
            ran.append(self.uninstall(desired))
            removed = True
        else:
            logger.info("%s already absent, skipping removal", desired.name)

        try:
            ran.append(self.install(desired))
        except InvocationFailure as e:
            if removed:
                raise PartialUpdateFailure(desired.name, e) from e
            raise
        return ran

    # ── State machine ───────────────────────────────────────────

    def reconcile(self, desired: DesiredState) -> ReconcileResult:
        """Apply whichever transition the current state calls for."""
        current = self.query.query(desired.name)
        result = ReconcileResult(
            name=desired.name,
            previous=current.ensure,
            current=current.ensure,
            dry_run=self.commands.dry_run,
        )
        target = desired.ensure

        if target == ABSENT:
            if isinstance(current, Absent):
                return result
            result.commands.append(self.uninstall(desired))
            return self._done(result, "uninstall", ABSENT)

        if isinstance(current, Absent):
            result.commands.append(self.install(desired))
            return self._done(result, "install", target if desired.wants_version else PRESENT)

        installed = current.ensure

        if target == PRESENT or target == installed:
            logger.debug("%s already at %s", desired.name, installed)
            return result

        if target == LATEST:
            self._require_source(desired)
            available = self.query.latest(desired.name, desired.source)
            if available is None:
                raise ConfigurationError(
                    f"Package {desired.name} is not available from source {desired.source}"
                )
            if available == installed:
                logger.debug("%s is the latest version (%s)", desired.name, installed)
                return result
            logger.info("%s: %s installed, %s available", desired.name, installed, available)
            result.commands.extend(self.update(desired))
            return self._done(result, "update", available)

        logger.info("%s: %s installed, %s wanted", desired.name, installed, target)
        result.commands.extend(self.update(desired))
        return self._done(result, "update", target)

    # ── Helpers ─────────────────────────────────────────────────

    def _done(self, result: ReconcileResult, action: ReconcileAction, ensure: str) -> ReconcileResult:
        result.action = action
        if not result.dry_run:
            result.current = ensure
        return result

    @staticmethod
    def _require_source(desired: DesiredState) -> None:
        if not desired.source:
            raise ConfigurationError("Sun packages must specify a package source")
