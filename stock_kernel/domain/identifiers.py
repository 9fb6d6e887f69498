"""
Identifiers -- client-side id generation.

Responsibility:
    Produces the three kinds of locally generated identifiers:

    * placeholder ids (``tmp-<hex>``) for records created optimistically,
      replaced by store-assigned ids on reconciliation;
    * correlation ids keying pending writes in the write queue;
    * transfer group ids (``GRP-<epoch ms>``) shared by every transaction of
      one transfer submission.

Architecture position:
    Kernel > Domain.  Time comes from the injected Clock; no direct
    ``datetime.now()``.

Invariants enforced:
    - Group ids are strictly increasing per generator, so two submissions in
      the same millisecond never share a group.
"""

from __future__ import annotations

from uuid import uuid4

from stock_kernel.domain.clock import Clock

PLACEHOLDER_PREFIX = "tmp-"


class IdGenerator:
    """Generates placeholder, correlation and transfer group ids."""

    def __init__(self, clock: Clock, group_prefix: str = "GRP"):
        self._clock = clock
        self._group_prefix = group_prefix
        self._last_group_ms = 0

    def placeholder_id(self) -> str:
        return f"{PLACEHOLDER_PREFIX}{uuid4().hex}"

    def correlation_id(self) -> str:
        return str(uuid4())

    def group_id(self) -> str:
        millis = int(self._clock.now().timestamp() * 1000)
        if millis <= self._last_group_ms:
            millis = self._last_group_ms + 1
        self._last_group_ms = millis
        return f"{self._group_prefix}-{millis}"

    @staticmethod
    def is_placeholder(record_id: str | None) -> bool:
        return bool(record_id) and record_id.startswith(PLACEHOLDER_PREFIX)
