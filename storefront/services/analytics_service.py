# storefront/services/analytics_service.py
from typing import List

from storefront.domain.schemas import CategoryCount, Order, Product, RevenueStats
from storefront.repos.base import Storage
from storefront.utils.settings import LOW_STOCK_THRESHOLD, RECENT_ORDERS_LIMIT


class AnalyticsService:
    """Zapytania dla panelu admina."""

    def __init__(self, storage: Storage):
        self.repo = storage

    def recent_orders(self, limit: int | None = None) -> List[Order]:
        return self.repo.get_recent_orders(RECENT_ORDERS_LIMIT if limit is None else limit)

    def low_stock(self, threshold: int | None = None) -> List[Product]:
        return self.repo.get_low_stock_products(LOW_STOCK_THRESHOLD if threshold is None else threshold)

    def revenue(self) -> RevenueStats:
        return self.repo.get_revenue_stats()

    def category_distribution(self) -> List[CategoryCount]:
        return self.repo.get_category_distribution()
