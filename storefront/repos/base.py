# storefront/repos/base.py
import calendar
from abc import ABC, abstractmethod
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, List

from storefront.domain.schemas import (
    ORDER_CANCELLED,
    CategoryCount,
    DailyRevenue,
    InsertOrder,
    InsertOrderItem,
    InsertProduct,
    InsertUser,
    MonthlyRevenue,
    Order,
    OrderItem,
    Product,
    ProductUpdate,
    RevenueStats,
    User,
    WeeklyRevenue,
)


class Storage(ABC):
    """
    Jedyna droga dostępu do danych sklepu.

    "Nie znaleziono" to zawsze None / False / pusta lista, nigdy wyjątek.
    """

    session_store = None

    # =====================================================
    # USERS
    # =====================================================
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(self, user: InsertUser) -> User: ...

    # =====================================================
    # PRODUCTS
    # =====================================================
    @abstractmethod
    def get_products(self) -> List[Product]: ...

    @abstractmethod
    def get_product_by_id(self, product_id: int) -> Product | None: ...

    @abstractmethod
    def get_products_by_category_name(self, category: str) -> List[Product]: ...

    @abstractmethod
    def get_featured_products(self) -> List[Product]: ...

    @abstractmethod
    def create_product(self, product: InsertProduct) -> Product: ...

    @abstractmethod
    def update_product(self, product_id: int, update: ProductUpdate | dict) -> Product | None: ...

    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...

    @abstractmethod
    def search_products(self, query: str) -> List[Product]: ...

    @abstractmethod
    def decrement_inventory(self, quantities: dict[int, int]) -> bool:
        """
        Zmniejsza stan wielu produktów naraz, albo żadnego.
        False gdy któregoś produktu nie ma lub ma inventory < ilość.
        """

    # =====================================================
    # ORDERS
    # =====================================================
    @abstractmethod
    def get_orders(self) -> List[Order]: ...

    @abstractmethod
    def get_order_by_id(self, order_id: int) -> Order | None: ...

    @abstractmethod
    def get_orders_by_user_id(self, user_id: int) -> List[Order]: ...

    @abstractmethod
    def create_order(self, order: InsertOrder, items: Iterable[InsertOrderItem]) -> Order: ...

    @abstractmethod
    def update_order_status(self, order_id: int, status: str) -> Order | None: ...

    @abstractmethod
    def get_order_items_by_order_id(self, order_id: int) -> List[OrderItem]: ...

    # =====================================================
    # ANALYTICS
    # =====================================================
    @abstractmethod
    def get_recent_orders(self, limit: int) -> List[Order]: ...

    @abstractmethod
    def get_low_stock_products(self, threshold: int) -> List[Product]: ...

    @abstractmethod
    def get_category_distribution(self) -> List[CategoryCount]: ...

    def get_revenue_stats(self) -> RevenueStats:
        """
        Przychód dzienny, tygodniowy (ISO) i miesięczny, okresy rosnąco.
        Przychód zamówienia = suma price * quantity jego pozycji;
        zamówienia anulowane są pomijane.
        """
        daily = defaultdict(lambda: Decimal("0.00"))
        weekly = defaultdict(lambda: Decimal("0.00"))
        monthly = defaultdict(lambda: Decimal("0.00"))

        for order in self.get_orders():
            if order.status == ORDER_CANCELLED:
                continue

            items = self.get_order_items_by_order_id(order.id)
            revenue = sum((i.price * i.quantity for i in items), Decimal("0.00"))

            day = order.created_at.date()
            iso_year, iso_week, _ = day.isocalendar()

            daily[day] += revenue
            weekly[(iso_year, iso_week)] += revenue
            monthly[(day.year, day.month)] += revenue

        return RevenueStats(
            daily=[DailyRevenue(date=d, revenue=r) for d, r in sorted(daily.items())],
            weekly=[
                WeeklyRevenue(week=w, year=y, revenue=r)
                for (y, w), r in sorted(weekly.items())
            ],
            monthly=[
                MonthlyRevenue(month=calendar.month_abbr[m], month_num=m, year=y, revenue=r)
                for (y, m), r in sorted(monthly.items())
            ],
        )


def product_changes(update: ProductUpdate | dict) -> dict:
    """Tylko pola faktycznie przesłane w aktualizacji, bez id/created_at."""
    if isinstance(update, ProductUpdate):
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
    else:
        changes = dict(update)
    return {k: v for k, v in changes.items() if k in InsertProduct.model_fields}
