"""
Invoices dashboard endpoints.

Mutations (form submissions):
1. POST /dashboard/invoices                      - create, redirect to list
2. POST /dashboard/invoices/{invoice_id}/edit    - update, redirect to list
3. POST /dashboard/invoices/{invoice_id}/delete  - delete, 204

Every mutation follows the same flow:
- Auth (get_authenticated_user dependency)
- Validate form fields
- Issue one statement against the invoices table; database errors are
  logged and swallowed so the caller always lands on the list view
- Invalidate the cached list view (INVOICES_PATH)
- Redirect (create/update) or return (delete)

Reads:
- GET /dashboard/invoices               - filtered, paginated list (cached)
- GET /dashboard/invoices/{invoice_id}  - single invoice
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from dashboard.auth.dependencies import AuthenticatedUser, get_authenticated_user
from dashboard.db.client import get_supabase_client
from dashboard.schemas.invoices import (
    InvoiceFormState,
    InvoiceListResponse,
    InvoiceResponse,
    parse_invoice_form,
    validate_invoice_form,
)
from dashboard.services import (
    delete_invoice,
    get_filtered_invoices,
    get_invoice_by_id,
    insert_invoice,
    revalidate_path,
    total_pages,
    update_invoice,
    view_cache,
)
from dashboard.services.cache import make_key
from dashboard.utils.constants import INVOICES_PATH

logger = logging.getLogger(__name__)

router = APIRouter(prefix=INVOICES_PATH, tags=["invoices"])

CustomerIdField = Annotated[Optional[str], Form(alias="customerId")]
AmountField = Annotated[Optional[str], Form(alias="amount")]
StatusField = Annotated[Optional[str], Form(alias="status")]


def _today() -> str:
    """Today's date in UTC as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def _redirect_to_list(invoice_date: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"{INVOICES_PATH}?{urlencode({'query': invoice_date})}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    responses={422: {"model": InvoiceFormState, "description": "Form validation failed"}},
    summary="Create an invoice",
    description="""
    Create an invoice from form fields customerId, amount (dollars), status.

    - Invalid input: 422 with per-field errors and the submitted values
    - Otherwise: inserts a row dated today, invalidates the list view and
      redirects to /dashboard/invoices?query=<today>
    - Database failures are logged, not reported; the redirect still happens
    """
)
async def create_invoice(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    customer_id: CustomerIdField = None,
    amount: AmountField = None,
    invoice_status: StatusField = None,
) -> Response:
    """
    Create an invoice.

    Validation failures are returned to the caller as an InvoiceFormState
    so the form can be redisplayed; nothing is written or invalidated.
    """
    validated = validate_invoice_form(
        {"customerId": customer_id, "amount": amount, "status": invoice_status}
    )

    if isinstance(validated, InvoiceFormState):
        logger.info(f"Create invoice rejected: invalid fields {sorted(validated.errors)}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=validated.model_dump(),
        )

    amount_in_cents = validated.amount_in_cents
    invoice_date = _today()

    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        await insert_invoice(
            supabase_client=supabase_client,
            customer_id=validated.customer_id,
            amount_in_cents=amount_in_cents,
            status=validated.status,
            invoice_date=invoice_date,
        )
    except Exception as e:
        logger.error(f"Database error: failed to create invoice: {e}", exc_info=True)

    revalidate_path(INVOICES_PATH)
    return _redirect_to_list(invoice_date)


@router.post(
    "/{invoice_id}/edit",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    responses={422: {"model": InvoiceFormState, "description": "Form validation failed"}},
    summary="Update an invoice",
)
async def edit_invoice(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    customer_id: CustomerIdField = None,
    amount: AmountField = None,
    invoice_status: StatusField = None,
) -> Response:
    """
    Update customer, amount and status of an invoice.

    Invalid input raises InvoiceValidationError, rendered as 422 by the
    application exception handler. An unknown invoice_id is a silent no-op.
    """
    form = parse_invoice_form(
        {"customerId": customer_id, "amount": amount, "status": invoice_status}
    )

    amount_in_cents = form.amount_in_cents
    invoice_date = _today()

    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        await update_invoice(
            supabase_client=supabase_client,
            invoice_id=invoice_id,
            customer_id=form.customer_id,
            amount_in_cents=amount_in_cents,
            status=form.status,
        )
    except Exception as e:
        logger.error(f"Database error: failed to update invoice {invoice_id}: {e}", exc_info=True)

    revalidate_path(INVOICES_PATH)
    return _redirect_to_list(invoice_date)


@router.post(
    "/{invoice_id}/delete",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an invoice",
)
async def remove_invoice(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> Response:
    """Delete an invoice and invalidate the list view. Always 204."""
    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        await delete_invoice(supabase_client=supabase_client, invoice_id=invoice_id)
    except Exception as e:
        logger.error(f"Database error: failed to delete invoice {invoice_id}: {e}", exc_info=True)

    revalidate_path(INVOICES_PATH)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=InvoiceListResponse,
    summary="List invoices",
    description="""
    One page of invoices, newest first, filtered by `query`
    (an ISO date, or a status substring). Served from the view cache until
    a mutation invalidates it.
    """
)
async def list_invoices(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    query: str = "",
    page: Annotated[int, Query(ge=1)] = 1,
) -> InvoiceListResponse:
    # Reads run under the caller's RLS scope, so cached pages are per user
    cache_key = make_key({"user": auth_user.user_id, "query": query, "page": page})

    cached = view_cache.get(INVOICES_PATH, cache_key)
    if cached is not None:
        logger.debug(f"Serving cached invoice list for query={query!r}, page={page}")
        return cached

    generation = view_cache.generation(INVOICES_PATH)

    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        invoices, total = await get_filtered_invoices(
            supabase_client=supabase_client,
            query=query,
            page=page,
        )
    except Exception as e:
        logger.error(f"Failed to fetch invoices: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "database_error",
                "details": "Failed to fetch invoices"
            }
        )

    response = InvoiceListResponse(
        invoices=[InvoiceResponse(**invoice) for invoice in invoices],
        count=len(invoices),
        total=total,
        total_pages=total_pages(total),
        page=page,
        query=query,
    )

    view_cache.set(INVOICES_PATH, cache_key, response, generation=generation)

    return response


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Get invoice details",
)
async def get_invoice(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> InvoiceResponse:
    try:
        supabase_client = get_supabase_client(auth_user.access_token)
        invoice = await get_invoice_by_id(supabase_client=supabase_client, invoice_id=invoice_id)
    except Exception as e:
        logger.error(f"Failed to fetch invoice {invoice_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "database_error",
                "details": "Failed to fetch invoice"
            }
        )

    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Invoice {invoice_id} not found"
            }
        )

    return InvoiceResponse(**invoice)
