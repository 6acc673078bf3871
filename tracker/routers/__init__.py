"""
Resource routers mounted under the API prefix by ``create_app``.
"""

from tracker.routers import (
    bookings,
    dashboard,
    depreciation,
    documents,
    health,
    properties,
    tax_forms,
    transactions,
)

ALL_ROUTERS = [
    health.router,
    properties.router,
    bookings.router,
    transactions.router,
    depreciation.router,
    dashboard.router,
    tax_forms.router,
    documents.storage_router,
    documents.documents_router,
    documents.participation_router,
]
