"""Mirror dispatch: storage events in, backup-store calls out."""

from core.mirror.dispatcher import MirrorDispatcher, MirrorOutcome, OutcomeStatus, settle
from core.mirror.operations import CreateDirectory, Delete, MirrorOperation, Rename, Upload

__all__ = [
    "CreateDirectory",
    "Delete",
    "MirrorDispatcher",
    "MirrorOperation",
    "MirrorOutcome",
    "OutcomeStatus",
    "Rename",
    "Upload",
    "settle",
]
