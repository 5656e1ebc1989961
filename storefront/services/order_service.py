# storefront/services/order_service.py
from decimal import Decimal
from typing import List

from storefront.domain.schemas import (
    ORDER_PENDING,
    CheckoutItemIn,
    InsertOrder,
    InsertOrderItem,
    Order,
    OrderOut,
    User,
)
from storefront.repos.base import Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    """

    def __init__(self, storage: Storage):
        self.repo = storage

    def _to_out(self, order: Order) -> OrderOut:
        items = self.repo.get_order_items_by_order_id(order.id)
        total = sum((i.price * i.quantity for i in items), Decimal("0.00"))
        return OrderOut(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            created_at=order.created_at,
            items=items,
            total=total,
        )

    def place_order(self, user_id: int, items: List[CheckoutItemIn]) -> OrderOut:
        """
        Use Case: Złożenie zamówienia.

        1. Sprawdza, czy produkty istnieją i są na stanie
        2. Zapisuje cenę z chwili zakupu
        3. Zmniejsza stan magazynowy (atomowo, z kontrolą ilości)
        4. Tworzy zamówienie z pozycjami
        """
        # to samo product_id kilka razy = jedna pozycja
        quantities: dict[int, int] = {}
        for item in items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        order_items = []
        for product_id, quantity in quantities.items():
            product = self.repo.get_product_by_id(product_id)
            if not product:
                raise ValueError(f"Produkt {product_id} nie istnieje")
            if product.inventory < quantity:
                raise ValueError(f"Brak wystarczającej ilości produktu {product_id}")

            order_items.append(
                InsertOrderItem(product_id=product_id, quantity=quantity, price=product.price)
            )

        # rezerwacja stanu: atomowo dla wszystkich pozycji, albo wcale
        if not self.repo.decrement_inventory(quantities):
            raise ValueError("Brak wystarczającej ilości produktów na stanie")

        created = self.repo.create_order(InsertOrder(user_id=user_id, status=ORDER_PENDING), order_items)

        logger.info(f"Order {created.id} placed by user {user_id} ({len(order_items)} items)")
        return self._to_out(created)

    def get_order(self, order_id: int, user: User) -> OrderOut:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order_by_id(order_id)

        if not order:
            raise ValueError("Zamówienie nie istnieje")

        if order.user_id != user.id and not user.is_admin:
            raise PermissionError("Brak dostępu do zamówienia")

        return self._to_out(order)

    def list_orders(self, user: User) -> List[OrderOut]:
        orders = self.repo.get_orders() if user.is_admin else self.repo.get_orders_by_user_id(user.id)
        return [self._to_out(o) for o in orders]

    def update_status(self, order_id: int, status: str) -> OrderOut:
        order = self.repo.update_order_status(order_id, status)
        if not order:
            raise ValueError("Zamówienie nie istnieje")
        logger.info(f"Order {order_id} status -> {status}")
        return self._to_out(order)
