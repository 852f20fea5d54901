"""Service failure contracts.

Services return typed outcomes on success and raise ServiceFailure on expected
configuration or runtime failures. Programmer bugs raise normal exceptions.
"""

from __future__ import annotations

from typing import Literal

ServiceFailureCode = Literal[
    "validation_failed",
    "dependency_missing",
    "snapshot_failed",
    "transfer_failed",
    "history_failed",
]


class ServiceFailure(Exception):
    """Expected service failure: configuration, local, or remote error.

    Raised by services instead of returning a failure value. Use ``raise
    ServiceFailure(...) from exc`` to chain a causing exception; it is
    available as ``__cause__``. The CLI catches ServiceFailure, prints the
    message and recovery hint, and exits non-zero.
    """

    def __init__(
        self,
        code: ServiceFailureCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class ValidationFailedError(ServiceFailure):
    """Configuration or input failed validation."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("validation_failed", message, recovery_hint=recovery_hint)


class DependencyMissingError(ServiceFailure):
    """Required executable (git, ssh) is missing."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("dependency_missing", message, recovery_hint=recovery_hint)


class SnapshotFailedError(ServiceFailure):
    """The working tree could not be captured as a commit."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("snapshot_failed", message, recovery_hint=recovery_hint)


class TransferFailedError(ServiceFailure):
    """The snapshot commit could not be sent to the remote host."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("transfer_failed", message, recovery_hint=recovery_hint)


class HistoryFailedError(ServiceFailure):
    """Local history could not be read or updated after the remote run."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("history_failed", message, recovery_hint=recovery_hint)
