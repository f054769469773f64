from pocketbooks.models.client import Client
from pocketbooks.models.vendor import Vendor
from pocketbooks.models.raw_material_type import RawMaterialType
from pocketbooks.models.inventory import RawMaterial, TradingGood, FinishedGood, FinishedGoodComponent
from pocketbooks.models.procurement import Procurement, ProcurementItem
from pocketbooks.models.asset import Asset, AssetProcurement, AssetProcurementItem
from pocketbooks.models.expense import Expense
from pocketbooks.models.loan import LoanAccount, InterestPayment
from pocketbooks.models.payment import Payment
from pocketbooks.models.sale import Sale, SaleItem
from pocketbooks.models.audit_log import AuditLog

__all__ = [
    "Client",
    "Vendor",
    "RawMaterialType",
    "RawMaterial",
    "TradingGood",
    "FinishedGood",
    "FinishedGoodComponent",
    "Procurement",
    "ProcurementItem",
    "Asset",
    "AssetProcurement",
    "AssetProcurementItem",
    "Expense",
    "LoanAccount",
    "InterestPayment",
    "Payment",
    "Sale",
    "SaleItem",
    "AuditLog",
]
