"""Dashboard schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class RecentSale(BaseModel):
    id: int
    invoice_number: str
    client_name: Optional[str] = None
    sale_date: datetime
    grand_total: float
    status: str
    payment_status: str


class LowStockItem(BaseModel):
    id: int
    name: str
    item_type: str
    current_stock: float
    reorder_level: float
    unit: str


class LowStockItems(BaseModel):
    raw_materials: List[LowStockItem] = []
    trading_goods: List[LowStockItem] = []


class DashboardData(BaseModel):
    total_sales: float = 0.0
    pending_receivables: float = 0.0
    pending_payables: float = 0.0
    cost_of_goods_sold: float = 0.0
    net_profit: float = 0.0
    total_assets: float = 0.0
    outstanding_loans: float = 0.0
    total_expenses: float = 0.0
    recent_sales: List[RecentSale] = []
    low_stock_items: LowStockItems = LowStockItems()
