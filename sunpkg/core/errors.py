"""
Error taxonomy for package operations.

Every failure the core can produce is one of these. They carry the
backend's raw message where one exists so callers can surface it.
"""

from __future__ import annotations


class PackageError(Exception):
    """Base class for all package operation failures."""


class InvocationFailure(PackageError):
    """A backend tool could not run, or exited nonzero when that was fatal."""

    def __init__(
        self,
        argv: list[str],
        message: str,
        return_code: int | None = None,
    ):
        self.argv = list(argv)
        self.message = message
        self.return_code = return_code
        super().__init__(f"Execution of '{' '.join(self.argv)}' failed: {message}")


class QueryFailure(PackageError):
    """A single-package query returned an error other than "not installed"."""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(
            f"Unable to get information about package {name} because of: {message}"
        )


class ConfigurationError(PackageError):
    """Desired state cannot be acted on (e.g. install without a source)."""


class PartialUpdateFailure(InvocationFailure):
    """Update removed the old package but failed to install the new one.

    The package is now absent. Nothing is rolled back; re-query to
    learn the true state.
    """

    def __init__(self, name: str, cause: InvocationFailure):
        self.name = name
        self.cause = cause
        PackageError.__init__(
            self,
            f"Package {name} was uninstalled but reinstall failed; "
            f"it is now absent: {cause.message}",
        )
        self.argv = cause.argv
        self.message = cause.message
        self.return_code = cause.return_code
