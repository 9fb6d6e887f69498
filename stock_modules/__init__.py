"""
stock_modules -- orchestration over the stock kernel.

Subpackages:
    transfers      multi-item transfers with approval workflow
    daily_log      single-location usage and receive entries
    notifications  one-shot incoming-transfer alerts
    access         location directory and user session
    catalogue      item maintenance

``stock_modules.app.StockApp`` wires them together for one client.
"""
