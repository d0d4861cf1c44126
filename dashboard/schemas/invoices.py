"""
Pydantic schemas for the invoices dashboard.

The form schema is shared by the create and update handlers. Field names on
the wire are the form input names (customerId, amount, status); Python
attributes use snake_case aliases.

Two validation entry points:
- validate_invoice_form(): returns the parsed form OR an InvoiceFormState
  with per-field errors (used by create, which re-renders the form)
- parse_invoice_form(): raises InvoiceValidationError (used by update)
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from dashboard.utils.constants import INVOICE_STATUSES, MAX_AMOUNT_CENTS

InvoiceStatus = Literal["pending", "paid"]

# Form input names, in display order
FORM_FIELDS = ("customerId", "amount", "status")

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer."
AMOUNT_INVALID_MESSAGE = "Please enter a valid amount."
AMOUNT_NOT_POSITIVE_MESSAGE = "Please enter an amount greater than $0."
STATUS_REQUIRED_MESSAGE = "Please select an invoice status."

CREATE_FAILED_MESSAGE = "Missing Fields. Failed to Create Invoice."
UPDATE_FAILED_MESSAGE = "Invalid Fields. Failed to Update Invoice."


def to_cents(amount: Decimal) -> int:
    """Dollars × 100, rounded half-up to a whole cent."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# --- Form input ---

class InvoiceForm(BaseModel):
    """
    Validated invoice form input.

    Every field is validated even when absent from the submission, so a
    missing field reports its own message instead of a generic "Field required".
    """
    customer_id: str = Field(None, alias="customerId", description="Customer UUID")
    amount: Decimal = Field(None, description="Amount in dollars, strictly positive")
    status: InvoiceStatus = Field(None, description="Invoice status")

    model_config = {
        "populate_by_name": True,
        "validate_default": True,
    }

    @field_validator("customer_id", mode="before")
    @classmethod
    def require_customer(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("customer_required", CUSTOMER_REQUIRED_MESSAGE)
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: object) -> Decimal:
        """
        Coerce the submitted amount to a Decimal.

        Blank or missing input counts as 0, so it fails the positivity check
        rather than the number check.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            value = "0"
        if isinstance(value, bool):
            raise PydanticCustomError("amount_invalid", AMOUNT_INVALID_MESSAGE)

        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise PydanticCustomError("amount_invalid", AMOUNT_INVALID_MESSAGE)

        if not amount.is_finite():
            raise PydanticCustomError("amount_invalid", AMOUNT_INVALID_MESSAGE)
        if amount <= 0:
            raise PydanticCustomError("amount_not_positive", AMOUNT_NOT_POSITIVE_MESSAGE)
        # Bound before quantizing: huge values overflow the decimal context
        if amount * 100 > MAX_AMOUNT_CENTS:
            raise PydanticCustomError("amount_invalid", AMOUNT_INVALID_MESSAGE)
        # Positivity must hold for the stored cents, not just the dollar input
        if to_cents(amount) <= 0:
            raise PydanticCustomError("amount_not_positive", AMOUNT_NOT_POSITIVE_MESSAGE)

        return amount

    @field_validator("status", mode="before")
    @classmethod
    def require_status(cls, value: object) -> str:
        if value not in INVOICE_STATUSES:
            raise PydanticCustomError("status_required", STATUS_REQUIRED_MESSAGE)
        return value

    @property
    def amount_in_cents(self) -> int:
        """Amount × 100, rounded half-up to a whole cent."""
        return to_cents(self.amount)


# --- Validation state returned to the form ---

class InvoiceFormState(BaseModel):
    """
    Result of a failed form submission.

    `values` echoes what was submitted so the form can be redisplayed;
    `errors` only contains the fields that failed.
    """
    values: Dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Submitted values keyed by form input name"
    )
    errors: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Validation messages keyed by form input name",
        examples=[{"amount": [AMOUNT_NOT_POSITIVE_MESSAGE]}]
    )
    message: Optional[str] = Field(
        None,
        description="Summary message",
        examples=[CREATE_FAILED_MESSAGE]
    )


class InvoiceValidationError(Exception):
    """Raised by parse_invoice_form; carries the state to render."""

    def __init__(self, state: InvoiceFormState):
        super().__init__(state.message or "Invalid invoice form")
        self.state = state


def _submitted_values(fields: Mapping[str, object]) -> Dict[str, Optional[str]]:
    values: Dict[str, Optional[str]] = {}
    for name in FORM_FIELDS:
        raw = fields.get(name)
        values[name] = None if raw is None else str(raw)
    return values


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(name, []).append(error["msg"])
    return errors


def validate_invoice_form(
    fields: Mapping[str, object],
    message: str = CREATE_FAILED_MESSAGE,
) -> InvoiceForm | InvoiceFormState:
    """
    Validate raw form fields without raising.

    Args:
        fields: Raw form data keyed by input name (customerId, amount, status)
        message: Summary message to attach on failure

    Returns:
        InvoiceForm on success, InvoiceFormState on failure.
    """
    submitted = {name: fields.get(name) for name in FORM_FIELDS}
    try:
        return InvoiceForm.model_validate(submitted)
    except ValidationError as exc:
        return InvoiceFormState(
            values=_submitted_values(fields),
            errors=_field_errors(exc),
            message=message,
        )


def parse_invoice_form(
    fields: Mapping[str, object],
    message: str = UPDATE_FAILED_MESSAGE,
) -> InvoiceForm:
    """
    Validate raw form fields, raising on failure.

    Raises:
        InvoiceValidationError: carrying the same state validate_invoice_form
            would have returned.
    """
    result = validate_invoice_form(fields, message=message)
    if isinstance(result, InvoiceFormState):
        raise InvoiceValidationError(result)
    return result


# --- Response models ---

class InvoiceResponse(BaseModel):
    """A single invoice row."""
    id: str = Field(..., description="Invoice UUID")
    customer_id: str = Field(..., description="Customer UUID")
    amount: int = Field(..., description="Amount in cents")
    status: InvoiceStatus = Field(..., description="Invoice status")
    date: str = Field(..., description="ISO date (YYYY-MM-DD)")


class InvoiceListResponse(BaseModel):
    """
    Response for GET /dashboard/invoices - one page of the filtered list.
    """
    invoices: List[InvoiceResponse] = Field(..., description="Invoices on this page")
    count: int = Field(..., description="Number of invoices returned on this page")
    total: int = Field(..., description="Number of invoices matching the query")
    total_pages: int = Field(..., description="Number of pages for the query")
    page: int = Field(..., description="Current page (1-based)")
    query: str = Field("", description="Filter applied to the list")
