from typing import Dict, List
from pydantic import BaseModel

class DailyPoint(BaseModel):
    date: str
    orders: int
    revenue: int

class MonthlyPoint(BaseModel):
    month: str
    orders: int
    revenue: int

class OrderSummary(BaseModel):
    total: int
    by_status: Dict[str, int]
    with_courier: int   # handed over but not yet delivered
    today: int
    this_month: int
    total_revenue: int
    daily: List[DailyPoint]
    monthly: List[MonthlyPoint]
