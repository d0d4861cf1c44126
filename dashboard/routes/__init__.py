"""
FastAPI routers for all API endpoints.

- invoices: /dashboard/invoices mutations and reads
- health: public /health
"""
