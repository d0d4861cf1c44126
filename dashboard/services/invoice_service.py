"""
Invoice persistence service.

Each mutation issues exactly one statement against the invoices table.
Functions here raise on database errors; the mutation handlers in
dashboard/routes/invoices.py decide whether to swallow them.

Amounts are stored as integer cents. Dates are ISO strings (YYYY-MM-DD).
"""

import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, cast

from supabase import Client

from dashboard.utils.constants import INVOICES_TABLE, ITEMS_PER_PAGE

logger = logging.getLogger(__name__)


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


async def insert_invoice(
    supabase_client: Client,
    customer_id: str,
    amount_in_cents: int,
    status: str,
    invoice_date: str,
) -> Optional[Dict[str, Any]]:
    """
    Insert one invoice row.

    Args:
        supabase_client: Authenticated Supabase client
        customer_id: Customer UUID
        amount_in_cents: Amount in cents (already converted)
        status: "pending" or "paid"
        invoice_date: ISO date stamped by the caller

    Returns:
        The inserted row, or None if the database returned no representation.

    Raises:
        Exception: If the database operation fails
    """
    invoice_data = {
        "customer_id": customer_id,
        "amount": amount_in_cents,
        "status": status,
        "date": invoice_date,
    }

    logger.info(
        f"Creating invoice: customer_id={customer_id}, "
        f"amount={amount_in_cents}, status={status}, date={invoice_date}"
    )

    result = supabase_client.table(INVOICES_TABLE).insert(invoice_data).execute()

    if not result.data:
        logger.warning("Invoice insert returned no data")
        return None

    created_invoice = cast(Dict[str, Any], result.data[0])

    logger.info(f"Invoice created successfully: id={created_invoice.get('id')}")

    return created_invoice


async def update_invoice(
    supabase_client: Client,
    invoice_id: str,
    customer_id: str,
    amount_in_cents: int,
    status: str,
) -> Optional[Dict[str, Any]]:
    """
    Update customer, amount and status of the invoice with `invoice_id`.

    The date column is left untouched.

    Returns:
        The updated row, or None when no row matched (a no-op, not an error).

    Raises:
        Exception: If the database operation fails
    """
    updates = {
        "customer_id": customer_id,
        "amount": amount_in_cents,
        "status": status,
    }

    logger.info(f"Updating invoice {invoice_id}: {list(updates.keys())}")

    result = (
        supabase_client.table(INVOICES_TABLE)
        .update(updates)
        .eq("id", invoice_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Invoice {invoice_id} not found, nothing updated")
        return None

    logger.info(f"Invoice {invoice_id} updated successfully")

    return cast(Dict[str, Any], result.data[0])


async def delete_invoice(
    supabase_client: Client,
    invoice_id: str,
) -> bool:
    """
    Delete the invoice with `invoice_id`.

    Returns:
        True if a row was removed, False if none matched.

    Raises:
        Exception: If the database operation fails
    """
    logger.info(f"Deleting invoice {invoice_id}")

    result = (
        supabase_client.table(INVOICES_TABLE)
        .delete()
        .eq("id", invoice_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Invoice {invoice_id} not found, nothing deleted")
        return False

    logger.info(f"Invoice {invoice_id} deleted successfully")

    return True


async def get_invoice_by_id(
    supabase_client: Client,
    invoice_id: str,
) -> Optional[Dict[str, Any]]:
    """
    Fetch a single invoice by its ID.

    Returns:
        Invoice record if found, None otherwise
    """
    logger.debug(f"Fetching invoice {invoice_id}")

    result = (
        supabase_client.table(INVOICES_TABLE)
        .select("*")
        .eq("id", invoice_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Invoice {invoice_id} not found")
        return None

    return cast(Dict[str, Any], result.data[0])


async def get_filtered_invoices(
    supabase_client: Client,
    query: str = "",
    page: int = 1,
    per_page: int = ITEMS_PER_PAGE,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch one page of invoices matching `query`, newest first.

    Filtering:
    - empty query: no filter
    - ISO date (YYYY-MM-DD): exact match on date
    - anything else: case-insensitive substring match on status

    Args:
        supabase_client: Authenticated Supabase client
        query: Filter string from the list view
        page: 1-based page number
        per_page: Page size

    Returns:
        Tuple of (invoices on this page, total matching rows)
    """
    query = query.strip()
    offset = (page - 1) * per_page

    logger.debug(f"Fetching invoices (query={query!r}, page={page}, per_page={per_page})")

    request = supabase_client.table(INVOICES_TABLE).select("*", count="exact")

    if query:
        if _is_iso_date(query):
            request = request.eq("date", query)
        else:
            request = request.ilike("status", f"%{escape_like(query)}%")

    result = (
        request
        .order("date", desc=True)
        .range(offset, offset + per_page - 1)
        .execute()
    )

    invoices = cast(List[Dict[str, Any]], result.data or [])
    total = result.count if result.count is not None else len(invoices)

    logger.info(f"Fetched {len(invoices)} of {total} invoices for query={query!r}")

    return invoices, total


def total_pages(total: int, per_page: int = ITEMS_PER_PAGE) -> int:
    """Number of list pages needed for `total` rows."""
    return math.ceil(total / per_page) if total > 0 else 0
