"""HTTP API routers."""

from duplex_tracker.api import admin, analytics, purchase_types, purchases, work_payments, work_projects

routers = [
    purchases.router,
    work_payments.router,
    work_projects.router,
    purchase_types.router,
    analytics.router,
    admin.router,
]

__all__ = ["routers"]
