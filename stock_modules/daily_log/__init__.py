"""
Daily Log Module (``stock_modules.daily_log``).

Single-location usage and receive entries, one at a time or as a validated
batch.  No approval workflow: everything is recorded ``completed``.
"""

from stock_modules.daily_log.models import BulkLogEntry
from stock_modules.daily_log.service import DailyLogService

__all__ = ["BulkLogEntry", "DailyLogService"]
