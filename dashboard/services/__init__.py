"""
Service layer for the invoice dashboard.

- invoice_service: persistence against the invoices table (raises on errors)
- cache: cached list-view payloads and path invalidation

Routes call these; routes decide which errors reach the caller.
"""

from .invoice_service import (
    delete_invoice,
    get_filtered_invoices,
    get_invoice_by_id,
    insert_invoice,
    total_pages,
    update_invoice,
)
from .cache import ViewCache, revalidate_path, view_cache

__all__ = [
    "insert_invoice",
    "update_invoice",
    "delete_invoice",
    "get_invoice_by_id",
    "get_filtered_invoices",
    "total_pages",
    "ViewCache",
    "view_cache",
    "revalidate_path",
]
