"""
Transfer Configuration Schema.

Category names given to items the transfer workflow creates, and the
locations a warehouse manager has source authority over.
"""

from dataclasses import dataclass, field

from stock_kernel.domain.values import MAMMAL, WAREHOUSE


@dataclass(frozen=True)
class TransferConfig:
    """
    Configuration for the transfer orchestrator.

        config = TransferConfig(received_category="Received")
    """

    # Category of an item created at the destination on receipt
    received_category: str = "Received"
    # Category of an item recreated at the source on reject/cancel
    returned_category: str = "Returned"
    central_locations: frozenset[str] = field(
        default_factory=lambda: frozenset({WAREHOUSE, MAMMAL}),
    )

    def __post_init__(self) -> None:
        if not self.received_category or not self.returned_category:
            raise ValueError("received_category and returned_category are required")
        object.__setattr__(self, "central_locations", frozenset(self.central_locations))
