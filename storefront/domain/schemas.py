# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import date as Date, datetime


ORDER_PENDING = "pending"
ORDER_PROCESSING = "processing"
ORDER_SHIPPED = "shipped"
ORDER_DELIVERED = "delivered"
ORDER_CANCELLED = "cancelled"


# =====================================================
# ENTITIES (repository)
# =====================================================
class InsertUser(BaseModel):
    """Dane nowego użytkownika; password to już zahashowany credential."""

    username: str
    email: str
    password: str
    full_name: str
    is_admin: bool = False


class User(InsertUser):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InsertProduct(BaseModel):
    name: str
    description: str
    price: Decimal
    image_url: str
    category: str
    inventory: int
    sku: str
    featured: bool = False


class Product(InsertProduct):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductUpdate(BaseModel):
    """Częściowa aktualizacja produktu - tylko przesłane pola są zmieniane."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    inventory: Optional[int] = None
    sku: Optional[str] = None
    featured: Optional[bool] = None


class InsertOrder(BaseModel):
    user_id: int
    status: str = ORDER_PENDING


class Order(InsertOrder):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InsertOrderItem(BaseModel):
    product_id: int
    quantity: int
    price: Decimal


class OrderItem(InsertOrderItem):
    id: int
    order_id: int

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# ANALYTICS
# =====================================================
class DailyRevenue(BaseModel):
    date: Date
    revenue: Decimal


class WeeklyRevenue(BaseModel):
    week: int
    year: int
    revenue: Decimal


class MonthlyRevenue(BaseModel):
    month: str
    month_num: int
    year: int
    revenue: Decimal


class RevenueStats(BaseModel):
    daily: List[DailyRevenue]
    weekly: List[WeeklyRevenue]
    monthly: List[MonthlyRevenue]


class CategoryCount(BaseModel):
    category: str
    count: int


# =====================================================
# API
# =====================================================
class UserCreate(BaseModel):
    """Schema dla rejestracji użytkownika."""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=200)


class LoginIn(BaseModel):
    username: str
    password: str


class UserRead(BaseModel):
    """Schema dla użytkownika (response) - bez hasła."""

    id: int
    username: str
    email: str
    full_name: str
    is_admin: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckoutItemIn(BaseModel):
    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class CheckoutIn(BaseModel):
    """Schema dla złożenia zamówienia."""

    items: List[CheckoutItemIn] = Field(..., min_length=1)


class OrderStatusIn(BaseModel):
    status: str = Field(..., min_length=1, max_length=50)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response) razem z pozycjami."""

    id: int
    user_id: int
    status: str
    created_at: datetime
    items: List[OrderItem]
    total: Decimal
