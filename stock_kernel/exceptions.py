"""
Typed Exception Hierarchy for the Stock Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (UI glue, scripts, tests) must be able to tell an insufficient-stock
refusal apart from a missing destination or a store outage without parsing
message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        transfers.initiate_transfer(lines, "riyadh-01", "warehouse", actor)
    except InsufficientStockError as e:
        show_inline_error(e.code, item=e.item_id, max_qty=e.available)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from StockKernelError:

    StockKernelError (base)
    |
    +-- ValidationError
    |   +-- InsufficientStockError
    |   +-- EmptyTransferError
    |   +-- EmptyBatchError
    |   +-- MissingDestinationError
    |   +-- SameLocationTransferError
    |   +-- InvalidLocationError
    |   +-- NonPositiveQuantityError
    |   +-- NegativeQuantityError
    |   +-- InvalidEntryTypeError
    |   +-- MissingRejectionReasonError
    |
    +-- NotFoundError
    |   +-- ItemNotFoundError
    |   +-- TransactionNotFoundError
    |   +-- TransferGroupNotFoundError
    |   +-- UserNotFoundError
    |   +-- LocationNotFoundError
    |
    +-- ConcurrencyError
    |   +-- OptimisticLockError
    |
    +-- PersistenceError
        +-- PersistenceFailedError
        +-- UnknownCollectionError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | INSUFFICIENT_STOCK          | Requested quantity exceeds stock
                | EMPTY_TRANSFER              | Transfer submitted with no lines
                | EMPTY_BATCH                 | Bulk log with no non-zero amounts
                | MISSING_DESTINATION         | Transfer without a target location
                | SAME_LOCATION_TRANSFER      | Source equals destination
                | INVALID_LOCATION            | Global view / unset stock location
                | NON_POSITIVE_QUANTITY       | Quantity <= 0 where > 0 required
                | NEGATIVE_QUANTITY           | Quantity < 0 where >= 0 required
                | INVALID_ENTRY_TYPE          | Daily log type not usage/receive
                | MISSING_REJECTION_REASON    | Reject called with blank reason
----------------|-----------------------------|-----------------------------------------
Not found       | ITEM_NOT_FOUND              | Item id/name absent at location
                | TRANSACTION_NOT_FOUND       | Transaction id absent from log
                | TRANSFER_GROUP_NOT_FOUND    | No transaction carries group id
                | USER_NOT_FOUND              | User id absent from directory
                | LOCATION_NOT_FOUND          | Location id not available
----------------|-----------------------------|-----------------------------------------
Concurrency     | OPTIMISTIC_LOCK_CONFLICT    | Version/status precondition failed
----------------|-----------------------------|-----------------------------------------
Persistence     | PERSISTENCE_FAILED          | A queued write could not be stored
                | UNKNOWN_COLLECTION          | Store asked for unmapped collection

===============================================================================
HANDLING PATTERNS
===============================================================================

1. VALIDATION errors are raised BEFORE any mutation.  Catching one means
   nothing changed, locally or in the store.

2. NOT-FOUND during a later workflow step (item deleted between initiate and
   confirm) is NOT raised; it is returned on the ``TransitionResult`` so the
   degraded path can be asserted on.

3. PERSISTENCE failures surface from ``ClientState.flush()`` after the local
   cache has already been resynchronised from the store:

    try:
        state.flush()
    except PersistenceFailedError as e:
        prompt_retry(e.code, e.correlation_id)
"""


class StockKernelError(Exception):
    """
    Base exception for all stock kernel errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "STOCK_KERNEL_ERROR"


# Validation exceptions


class ValidationError(StockKernelError):
    """Base exception for input rejected before any mutation."""

    code: str = "VALIDATION_ERROR"


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the quantity on hand."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        item_id: str,
        location_id: str,
        requested: str,
        available: str,
    ):
        self.item_id = item_id
        self.location_id = location_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for item {item_id} at {location_id}: "
            f"requested {requested}, available {available}"
        )


class EmptyTransferError(ValidationError):
    """Transfer submitted without any lines."""

    code: str = "EMPTY_TRANSFER"

    def __init__(self):
        super().__init__("Transfer must contain at least one item")


class EmptyBatchError(ValidationError):
    """Bulk daily log contains no non-zero amounts."""

    code: str = "EMPTY_BATCH"

    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"No changes to save for {location_id}")


class MissingDestinationError(ValidationError):
    """Transfer submitted without a destination location."""

    code: str = "MISSING_DESTINATION"

    def __init__(self):
        super().__init__("Transfer destination is required")


class SameLocationTransferError(ValidationError):
    """Transfer source and destination are the same location."""

    code: str = "SAME_LOCATION_TRANSFER"

    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"Cannot transfer from {location_id} to itself")


class InvalidLocationError(ValidationError):
    """Location is unset or is the global (cross-location) view."""

    code: str = "INVALID_LOCATION"

    def __init__(self, location_id: str | None, reason: str):
        self.location_id = location_id
        self.reason = reason
        super().__init__(f"Invalid location {location_id!r}: {reason}")


class NonPositiveQuantityError(ValidationError):
    """Quantity must be strictly positive."""

    code: str = "NON_POSITIVE_QUANTITY"

    def __init__(self, quantity: str, item_id: str | None = None):
        self.quantity = quantity
        self.item_id = item_id
        super().__init__(
            f"Quantity must be greater than zero (got {quantity}"
            + (f" for item {item_id})" if item_id else ")")
        )


class NegativeQuantityError(ValidationError):
    """Quantity must not be negative."""

    code: str = "NEGATIVE_QUANTITY"

    def __init__(self, quantity: str, item_id: str | None = None):
        self.quantity = quantity
        self.item_id = item_id
        super().__init__(
            f"Quantity cannot be negative (got {quantity}"
            + (f" for item {item_id})" if item_id else ")")
        )


class InvalidEntryTypeError(ValidationError):
    """Daily log entries are limited to usage and receive."""

    code: str = "INVALID_ENTRY_TYPE"

    def __init__(self, entry_type: str):
        self.entry_type = entry_type
        super().__init__(
            f"Daily log entry type must be 'usage' or 'receive', got '{entry_type}'"
        )


class MissingRejectionReasonError(ValidationError):
    """Rejecting a transfer requires a non-blank reason."""

    code: str = "MISSING_REJECTION_REASON"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Rejection of {transaction_id} requires a reason")


# Not-found exceptions


class NotFoundError(StockKernelError):
    """Base exception for lookups that found nothing."""

    code: str = "NOT_FOUND"


class ItemNotFoundError(NotFoundError):
    """Item with given id (or name) is not stocked at the location."""

    code: str = "ITEM_NOT_FOUND"

    def __init__(self, item_ref: str, location_id: str):
        self.item_ref = item_ref
        self.location_id = location_id
        super().__init__(f"Item {item_ref} not found at {location_id}")


class TransactionNotFoundError(NotFoundError):
    """Transaction with given id is not in the log."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class TransferGroupNotFoundError(NotFoundError):
    """No transaction carries the given transfer group id."""

    code: str = "TRANSFER_GROUP_NOT_FOUND"

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Transfer group not found: {group_id}")


class UserNotFoundError(NotFoundError):
    """User with given id is not in the directory."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class LocationNotFoundError(NotFoundError):
    """Location id is neither static nor a provisioned branch."""

    code: str = "LOCATION_NOT_FOUND"

    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"Location not found: {location_id}")


# Concurrency exceptions


class ConcurrencyError(StockKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class OptimisticLockError(ConcurrencyError):
    """A version or status precondition did not hold."""

    code: str = "OPTIMISTIC_LOCK_CONFLICT"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        expected: str | None = None,
        actual: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Optimistic lock conflict on {entity_type} {entity_id}: "
            f"expected {expected}, found {actual}"
        )


# Persistence exceptions


class PersistenceError(StockKernelError):
    """Base exception for record store failures."""

    code: str = "PERSISTENCE_ERROR"


class PersistenceFailedError(PersistenceError):
    """A queued write could not be applied to the store."""

    code: str = "PERSISTENCE_FAILED"

    def __init__(
        self,
        correlation_id: str,
        operation: str,
        collection: str,
        reason: str,
        cause_code: str | None = None,
    ):
        self.correlation_id = correlation_id
        self.operation = operation
        self.collection = collection
        self.reason = reason
        self.cause_code = cause_code
        super().__init__(
            f"Write {correlation_id} ({operation} {collection}) failed: {reason}"
        )


class UnknownCollectionError(PersistenceError):
    """Collection name is not mapped to a table."""

    code: str = "UNKNOWN_COLLECTION"

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Unknown collection: {collection}")
