from .base import BaseService
from .errors import (
    DependencyMissingError,
    HistoryFailedError,
    ServiceFailure,
    SnapshotFailedError,
    TransferFailedError,
    ValidationFailedError,
)

__all__ = [
    "BaseService",
    "DependencyMissingError",
    "HistoryFailedError",
    "ServiceFailure",
    "SnapshotFailedError",
    "TransferFailedError",
    "ValidationFailedError",
]
