"""API router aggregation"""
from fastapi import APIRouter

from pocketbooks.api.endpoints import (
    analytics, assets, audit_logs, clients, expenses, health, interest_payments,
    inventory, loan_accounts, payments, procurement, sales, settings, system, vendors,
)

api_router = APIRouter()

# parties
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"])
api_router.include_router(vendors.router, prefix="/vendors", tags=["Vendors"])

# stock and trade
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(procurement.router, prefix="/procurement", tags=["Procurement"])
api_router.include_router(sales.router, prefix="/sales", tags=["Sales"])

# money
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["Expenses"])
api_router.include_router(assets.router, prefix="/assets", tags=["Assets"])
api_router.include_router(loan_accounts.router, prefix="/loan-accounts", tags=["Loan accounts"])
api_router.include_router(interest_payments.router, prefix="/interest-payments", tags=["Interest payments"])

# reporting and system
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["Audit log"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(system.router, prefix="/system", tags=["System"])
