"""
Transfers Module (``stock_modules.transfers``).

Responsibility
--------------
Multi-item stock moves between locations with a two-step approval:
outbound confirmation at the source (skipped when the initiator manages the
source) and acceptance at the destination.  Reject and cancel reverse any
deduction already made.

Architecture
------------
Layer: **Modules** -- declarative workflow, authority rule, config schema and
a thin orchestration service over ``stock_kernel.services.ClientState``.
Imports from ``stock_kernel`` but never the reverse.
"""

from stock_modules.transfers.authority import is_manager_of_source, source_authority
from stock_modules.transfers.config import TransferConfig
from stock_modules.transfers.models import (
    StockEffect,
    TransferLine,
    TransferSubmission,
    TransitionOutcome,
    TransitionResult,
)
from stock_modules.transfers.service import TransferService
from stock_modules.transfers.workflows import TRANSFER_WORKFLOW

__all__ = [
    "is_manager_of_source",
    "source_authority",
    "TransferConfig",
    "StockEffect",
    "TransferLine",
    "TransferSubmission",
    "TransitionOutcome",
    "TransitionResult",
    "TransferService",
    "TRANSFER_WORKFLOW",
]
