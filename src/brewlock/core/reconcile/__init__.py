"""Reconciliation between ``brew.lock`` and the live system."""

from brewlock.core.lockfile.operations import remove, upsert
from brewlock.core.reconcile.engine import (
    INSTALL_COMMANDS,
    UNINSTALL_COMMANDS,
    check_drift,
    generate,
    record_command,
)
from brewlock.core.reconcile.models import (
    ChangeAction,
    DriftReport,
    LockChange,
    LockUpdate,
    Mismatch,
)

__all__ = [
    "INSTALL_COMMANDS",
    "UNINSTALL_COMMANDS",
    "ChangeAction",
    "DriftReport",
    "LockChange",
    "LockUpdate",
    "Mismatch",
    "check_drift",
    "generate",
    "record_command",
    "remove",
    "upsert",
]
