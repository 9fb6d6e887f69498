"""
Module: stock_kernel.models.transaction
Responsibility: ORM persistence for the transaction log (``transactions``).
Architecture position: Kernel > Models.  Imports only db/base.py.

Invariants enforced:
    - quantity uses Decimal (Numeric) -- NEVER float.
    - type and status stored as String(20) (TransactionType / TransactionStatus).
    - Status changes are guarded by the record store's expected-status
      precondition, not by a version column.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stock_kernel.db.base import Base, as_aware


class TransactionModel(Base):
    """
    ORM model for one stock movement.

    Maps to: stock_kernel.domain.dtos.Transaction (frozen dataclass).
    """

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_txn_date", "date"),
        Index("idx_txn_group", "transfer_group_id"),
        Index("idx_txn_to_status", "to_location", "status"),
    )

    transfer_group_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    date: Mapped[datetime] = mapped_column()
    type: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20))
    from_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    to_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    item_name_en: Mapped[str] = mapped_column(String(200))
    item_name_ar: Mapped[str | None] = mapped_column(String(200), nullable=True)
    quantity: Mapped[Decimal] = mapped_column()
    unit: Mapped[str] = mapped_column(String(30))
    performed_by: Mapped[str] = mapped_column(String(200))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "transfer_group_id": self.transfer_group_id,
            "date": as_aware(self.date),
            "type": self.type,
            "status": self.status,
            "from_location": self.from_location,
            "to_location": self.to_location,
            "item_name_en": self.item_name_en,
            "item_name_ar": self.item_name_ar,
            "quantity": self.quantity,
            "unit": self.unit,
            "performed_by": self.performed_by,
            "notes": self.notes,
            "rejection_reason": self.rejection_reason,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "TransactionModel":
        model = cls(
            transfer_group_id=record.get("transfer_group_id"),
            date=record["date"],
            type=record["type"],
            status=record["status"],
            from_location=record.get("from_location"),
            to_location=record.get("to_location"),
            item_name_en=record["item_name_en"],
            item_name_ar=record.get("item_name_ar"),
            quantity=record["quantity"],
            unit=record["unit"],
            performed_by=record["performed_by"],
            notes=record.get("notes"),
            rejection_reason=record.get("rejection_reason"),
        )
        if record.get("id"):
            model.id = record["id"]
        return model

    def __repr__(self) -> str:
        return (
            f"<TransactionModel {self.id} {self.type} {self.status} "
            f"{self.from_location}->{self.to_location}>"
        )
