"""
Shared constants for the invoices dashboard.

INVOICES_PATH is both the list-view route and the view-cache key that every
mutation invalidates. Always use the constant; never spell the path inline.
"""

INVOICES_TABLE = "invoices"

INVOICES_PATH = "/dashboard/invoices"

# Allowed values for invoices.status
INVOICE_STATUSES = ("pending", "paid")

# List view page size
ITEMS_PER_PAGE = 6

# invoices.amount is a Postgres integer column (cents)
MAX_AMOUNT_CENTS = 2_147_483_647
