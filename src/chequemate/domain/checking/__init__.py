"""Match-result checkers and the processing step they share."""

from __future__ import annotations

from .backup_sweep import BackupSweepChecker, SweepReport
from .per_match import (
    CheckerEntry,
    CheckerStatus,
    CheckState,
    MatchCheckRequest,
    PerMatchChecker,
)
from .processing import MatchResultProcessor, ProcessingOutcome

__all__ = [
    "BackupSweepChecker",
    "CheckState",
    "CheckerEntry",
    "CheckerStatus",
    "MatchCheckRequest",
    "MatchResultProcessor",
    "PerMatchChecker",
    "ProcessingOutcome",
    "SweepReport",
]
