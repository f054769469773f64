"""Enumerations stored as plain strings in the database."""

from enum import Enum


class EntityStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProcurementStatus(str, Enum):
    ORDERED = "ordered"
    RECEIVED = "received"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProcurementType(str, Enum):
    RAW_MATERIAL = "raw_material"
    TRADING_GOOD = "trading_good"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    FULLY_PAID = "fully_paid"


class SaleStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    UPI = "upi"
    CARD = "card"
    OTHER = "other"


class TransactionType(str, Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    EXPENSE = "expense"


class AccountType(str, Enum):
    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class PartyType(str, Enum):
    CLIENT = "client"
    VENDOR = "vendor"


class ExpenseCategory(str, Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    SALARIES = "salaries"
    TRANSPORTATION = "transportation"
    OFFICE_SUPPLIES = "office_supplies"
    MARKETING = "marketing"
    MAINTENANCE = "maintenance"
    PROFESSIONAL_FEES = "professional_fees"
    INSURANCE = "insurance"
    TAXES = "taxes"
    INTEREST = "interest"
    MISCELLANEOUS = "miscellaneous"


class AssetCategory(str, Enum):
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    MACHINERY = "machinery"
    VEHICLE = "vehicle"
    OFFICE_EQUIPMENT = "office_equipment"
    OTHER = "other"


class AssetStatus(str, Enum):
    ACTIVE = "active"
    REPAIR = "repair"
    RETIRED = "retired"
    DISPOSED = "disposed"


class LoanAccountStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    DEFAULTED = "defaulted"


class UnitOfMeasurement(str, Enum):
    KG = "kg"
    GRAM = "gram"
    LITER = "liter"
    MILLILITER = "milliliter"
    PIECE = "piece"
    BOX = "box"
    CARTON = "carton"
    METER = "meter"
    CENTIMETER = "centimeter"
    SQUARE_METER = "square_meter"
    CUBIC_METER = "cubic_meter"
    DOZEN = "dozen"
    PACKET = "packet"
    BAG = "bag"
    OTHER = "other"


class InventoryItemType(str, Enum):
    RAW_MATERIAL = "raw_material"
    TRADING_GOOD = "trading_good"
    FINISHED_GOOD = "finished_good"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    STATUS_CHANGE = "STATUS_CHANGE"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    STOCK_ADJUSTMENT = "STOCK_ADJUSTMENT"
