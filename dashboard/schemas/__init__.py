"""
Pydantic schemas for API request and response validation.

Form input is validated here too (InvoiceForm); routes never read raw
form values past the validation step.
"""
