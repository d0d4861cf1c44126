"""
Run the invoice dashboard locally.

Starts a uvicorn server with auto-reload and prints the endpoints.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Invoice Dashboard Backend")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:    GET  http://localhost:8000/health")
    print("   - List invoices:   GET  http://localhost:8000/dashboard/invoices?query=&page=1")
    print("   - Create invoice:  POST http://localhost:8000/dashboard/invoices")
    print("   - Update invoice:  POST http://localhost:8000/dashboard/invoices/{id}/edit")
    print("   - Delete invoice:  POST http://localhost:8000/dashboard/invoices/{id}/delete")
    print("   - API Docs:             http://localhost:8000/docs")
    print()
    print("🔐 Authentication:")
    print("   All /dashboard endpoints require 'Authorization: Bearer <supabase-token>'")
    print()
    print("📝 Example (create):")
    print('   curl -i -X POST http://localhost:8000/dashboard/invoices \\')
    print('     -H "Authorization: Bearer $TOKEN" \\')
    print('     -d customerId=<customer-uuid> -d amount=157.95 -d status=pending')
    print()
    print("=" * 60)
    print()

    uvicorn.run(
        "dashboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
