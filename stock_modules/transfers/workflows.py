"""
Transfer Workflow.

State machine for a single transfer transaction, from creation through
outbound confirmation and acceptance, rejection or cancellation.
"""

from stock_kernel.domain.values import TransactionStatus
from stock_kernel.domain.workflow import Guard, Transition, Workflow
from stock_kernel.logging_config import get_logger

logger = get_logger("modules.transfers.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

SOURCE_STOCK_AVAILABLE = Guard(
    name="source_stock_available",
    description="Source item holds at least the transferred quantity",
)

REASON_GIVEN = Guard(
    name="reason_given",
    description="A non-blank rejection reason was supplied",
)


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------

CONFIRM_OUTBOUND = "confirm_outbound"
RECEIVE = "receive"
REJECT = "reject"
CANCEL = "cancel"

_PS = TransactionStatus.PENDING_SOURCE.value
_PT = TransactionStatus.PENDING_TARGET.value
_DONE = TransactionStatus.COMPLETED.value
_REJ = TransactionStatus.REJECTED.value
_CAN = TransactionStatus.CANCELLED.value


TRANSFER_WORKFLOW = Workflow(
    name="stock_transfer",
    description="Stock transfer between locations",
    initial_state=_PS,
    states=(_PS, _PT, _DONE, _REJ, _CAN),
    transitions=(
        Transition(_PS, _PT, action=CONFIRM_OUTBOUND,
                   guard=SOURCE_STOCK_AVAILABLE, moves_stock=True),
        Transition(_PT, _DONE, action=RECEIVE, moves_stock=True),
        Transition(_PS, _REJ, action=REJECT, guard=REASON_GIVEN),
        Transition(_PT, _REJ, action=REJECT, guard=REASON_GIVEN, moves_stock=True),
        Transition(_PS, _CAN, action=CANCEL),
        Transition(_PT, _CAN, action=CANCEL, moves_stock=True),
    ),
    terminal_states=(_DONE, _REJ, _CAN),
    entry_states=(_PS, _PT),
)

logger.info(
    "transfer_workflow_registered",
    extra={
        "workflow_name": TRANSFER_WORKFLOW.name,
        "state_count": len(TRANSFER_WORKFLOW.states),
        "transition_count": len(TRANSFER_WORKFLOW.transitions),
        "initial_state": TRANSFER_WORKFLOW.initial_state,
    },
)
