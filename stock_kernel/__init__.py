"""
Stock Kernel - multi-location inventory transfer core.

An optimistic, cache-first stock tracker with:
- Per-location inventory with versioned quantity writes
- Status-tracked transaction log (transfers, usage, receipts)
- Deferred persistence through a correlation-keyed write queue
- Placeholder-id reconciliation with store-assigned ids
"""

__version__ = "0.1.0"
