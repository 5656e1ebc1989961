# storefront/repos/memory.py
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Iterable, List

from storefront.domain.schemas import (
    CategoryCount,
    InsertOrder,
    InsertOrderItem,
    InsertProduct,
    InsertUser,
    Order,
    OrderItem,
    Product,
    ProductUpdate,
    User,
)
from storefront.repos.base import Storage, product_changes
from storefront.repos.sessions import MemorySessionStore
from storefront.utils.settings import SESSION_CHECK_PERIOD_SECONDS, SESSION_TTL_SECONDS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage(Storage):
    """
    Repozytorium w pamięci procesu.
    -słowniki id -> encja dla każdego rodzaju encji
    -osobny licznik id (od 1) i osobny lock na rodzaj encji
    -zapis zawsze zastępuje cały rekord pod kluczem
    -na zewnątrz wychodzą kopie, nie obiekty ze słowników
    """

    def __init__(self, session_store=None, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock

        self._users: dict[int, User] = {}
        self._products: dict[int, Product] = {}
        self._orders: dict[int, Order] = {}
        self._order_items: dict[int, OrderItem] = {}

        self._user_id = 1
        self._product_id = 1
        self._order_id = 1
        self._order_item_id = 1

        self._users_lock = threading.RLock()
        self._products_lock = threading.RLock()
        self._orders_lock = threading.RLock()
        self._order_items_lock = threading.RLock()

        self.session_store = session_store or MemorySessionStore(
            check_period=SESSION_CHECK_PERIOD_SECONDS,
            ttl=SESSION_TTL_SECONDS,
        )

    # =====================================================
    # USERS
    # =====================================================
    def get_user(self, user_id: int) -> User | None:
        with self._users_lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._users_lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
        return None

    def get_user_by_email(self, email: str) -> User | None:
        with self._users_lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy()
        return None

    def create_user(self, user: InsertUser) -> User:
        with self._users_lock:
            created = User(id=self._user_id, created_at=self._clock(), **user.model_dump())
            self._users[created.id] = created
            self._user_id += 1
            return created.model_copy()

    # =====================================================
    # PRODUCTS
    # =====================================================
    def _all_products(self) -> List[Product]:
        with self._products_lock:
            return [p.model_copy() for p in self._products.values()]

    def get_products(self) -> List[Product]:
        return self._all_products()

    def get_product_by_id(self, product_id: int) -> Product | None:
        with self._products_lock:
            product = self._products.get(product_id)
            return product.model_copy() if product else None

    def get_products_by_category_name(self, category: str) -> List[Product]:
        wanted = category.lower()
        return [p for p in self._all_products() if p.category.lower() == wanted]

    def get_featured_products(self) -> List[Product]:
        return [p for p in self._all_products() if p.featured]

    def create_product(self, product: InsertProduct) -> Product:
        with self._products_lock:
            created = Product(id=self._product_id, created_at=self._clock(), **product.model_dump())
            self._products[created.id] = created
            self._product_id += 1
            return created.model_copy()

    def update_product(self, product_id: int, update: ProductUpdate | dict) -> Product | None:
        with self._products_lock:
            existing = self._products.get(product_id)
            if existing is None:
                return None

            updated = Product.model_validate({**existing.model_dump(), **product_changes(update)})
            self._products[product_id] = updated
            return updated.model_copy()

    def delete_product(self, product_id: int) -> bool:
        with self._products_lock:
            return self._products.pop(product_id, None) is not None

    def search_products(self, query: str) -> List[Product]:
        term = query.lower()
        return [
            p for p in self._all_products()
            if term in p.name.lower()
            or term in p.description.lower()
            or term in p.category.lower()
        ]

    def decrement_inventory(self, quantities: dict[int, int]) -> bool:
        # sprawdzenie i zapis pod jednym lockiem
        with self._products_lock:
            for product_id, quantity in quantities.items():
                product = self._products.get(product_id)
                if product is None or product.inventory < quantity:
                    return False

            for product_id, quantity in quantities.items():
                product = self._products[product_id]
                self._products[product_id] = product.model_copy(
                    update={"inventory": product.inventory - quantity}
                )
            return True

    # =====================================================
    # ORDERS
    # =====================================================
    def _all_orders(self) -> List[Order]:
        with self._orders_lock:
            return [o.model_copy() for o in self._orders.values()]

    def get_orders(self) -> List[Order]:
        return self._all_orders()

    def get_order_by_id(self, order_id: int) -> Order | None:
        with self._orders_lock:
            order = self._orders.get(order_id)
            return order.model_copy() if order else None

    def get_orders_by_user_id(self, user_id: int) -> List[Order]:
        return [o for o in self._all_orders() if o.user_id == user_id]

    def create_order(self, order: InsertOrder, items: Iterable[InsertOrderItem]) -> Order:
        with self._orders_lock, self._order_items_lock:
            created = Order(id=self._order_id, created_at=self._clock(), **order.model_dump())
            self._orders[created.id] = created

            for item in items:
                stored = OrderItem(id=self._order_item_id, order_id=created.id, **item.model_dump())
                self._order_items[stored.id] = stored
                self._order_item_id += 1

            self._order_id += 1
            return created.model_copy()

    def update_order_status(self, order_id: int, status: str) -> Order | None:
        with self._orders_lock:
            existing = self._orders.get(order_id)
            if existing is None:
                return None

            updated = existing.model_copy(update={"status": status})
            self._orders[order_id] = updated
            return updated.model_copy()

    def get_order_items_by_order_id(self, order_id: int) -> List[OrderItem]:
        with self._order_items_lock:
            return [i.model_copy() for i in self._order_items.values() if i.order_id == order_id]

    # =====================================================
    # ANALYTICS
    # =====================================================
    def get_recent_orders(self, limit: int) -> List[Order]:
        # sorted() is stable, so ties keep storage order
        ordered = sorted(self._all_orders(), key=lambda o: o.created_at, reverse=True)
        return ordered[:max(limit, 0)]

    def get_low_stock_products(self, threshold: int) -> List[Product]:
        low = [p for p in self._all_products() if p.inventory <= threshold]
        return sorted(low, key=lambda p: p.inventory)

    def get_category_distribution(self) -> List[CategoryCount]:
        counts = Counter(p.category for p in self._all_products())
        return [CategoryCount(category=c, count=n) for c, n in counts.items()]
