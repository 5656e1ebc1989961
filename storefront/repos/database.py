# storefront/repos/database.py
from datetime import datetime, timezone
from typing import Callable, Iterable, List

from sqlalchemy import func, or_, select
from sqlalchemy import update as sql_update
from sqlalchemy.orm import sessionmaker

from storefront.data.models import OrderItemModel, OrderModel, ProductModel, UserModel
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
from storefront.utils.retry import db_retry
from storefront.utils.settings import SESSION_CHECK_PERIOD_SECONDS, SESSION_TTL_SECONDS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DatabaseStorage(Storage):
    """
    To samo API co MemStorage, ale na SQLAlchemy.
    Każda operacja to osobna sesja; create_order to jedna transakcja.
    """

    def __init__(self, session_factory: sessionmaker, session_store=None, clock: Callable[[], datetime] = _utcnow):
        self.session_factory = session_factory
        self._clock = clock
        self.session_store = session_store or MemorySessionStore(
            check_period=SESSION_CHECK_PERIOD_SECONDS,
            ttl=SESSION_TTL_SECONDS,
        )

    # =====================================================
    # USERS
    # =====================================================
    @db_retry()
    def get_user(self, user_id: int) -> User | None:
        with self.session_factory() as db:
            row = db.get(UserModel, user_id)
            return User.model_validate(row) if row else None

    @db_retry()
    def get_user_by_username(self, username: str) -> User | None:
        with self.session_factory() as db:
            row = db.execute(
                select(UserModel).where(UserModel.username == username)
            ).scalar_one_or_none()
            return User.model_validate(row) if row else None

    @db_retry()
    def get_user_by_email(self, email: str) -> User | None:
        with self.session_factory() as db:
            row = db.execute(
                select(UserModel).where(UserModel.email == email)
            ).scalar_one_or_none()
            return User.model_validate(row) if row else None

    def create_user(self, user: InsertUser) -> User:
        with self.session_factory() as db:
            row = UserModel(created_at=self._clock(), **user.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
            return User.model_validate(row)

    # =====================================================
    # PRODUCTS
    # =====================================================
    def _select_products(self, *criteria) -> List[Product]:
        with self.session_factory() as db:
            rows = db.execute(
                select(ProductModel).where(*criteria).order_by(ProductModel.id)
            ).scalars().all()
            return [Product.model_validate(r) for r in rows]

    @db_retry()
    def get_products(self) -> List[Product]:
        return self._select_products()

    @db_retry()
    def get_product_by_id(self, product_id: int) -> Product | None:
        with self.session_factory() as db:
            row = db.get(ProductModel, product_id)
            return Product.model_validate(row) if row else None

    @db_retry()
    def get_products_by_category_name(self, category: str) -> List[Product]:
        return self._select_products(func.lower(ProductModel.category) == category.lower())

    @db_retry()
    def get_featured_products(self) -> List[Product]:
        return self._select_products(ProductModel.featured.is_(True))

    def create_product(self, product: InsertProduct) -> Product:
        with self.session_factory() as db:
            row = ProductModel(created_at=self._clock(), **product.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
            return Product.model_validate(row)

    def update_product(self, product_id: int, update: ProductUpdate | dict) -> Product | None:
        with self.session_factory() as db:
            row = db.get(ProductModel, product_id)
            if row is None:
                return None

            # walidacja jak w MemStorage (np. float -> Decimal)
            merged = Product.model_validate(
                {**Product.model_validate(row).model_dump(), **product_changes(update)}
            )
            for field in InsertProduct.model_fields:
                setattr(row, field, getattr(merged, field))

            db.commit()
            db.refresh(row)
            return Product.model_validate(row)

    def delete_product(self, product_id: int) -> bool:
        with self.session_factory() as db:
            row = db.get(ProductModel, product_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    @db_retry()
    def search_products(self, query: str) -> List[Product]:
        # contains() with autoescape keeps % and _ literal, like a plain substring test
        term = query.lower()
        return self._select_products(
            or_(
                func.lower(ProductModel.name).contains(term, autoescape=True),
                func.lower(ProductModel.description).contains(term, autoescape=True),
                func.lower(ProductModel.category).contains(term, autoescape=True),
            )
        )

    def decrement_inventory(self, quantities: dict[int, int]) -> bool:
        with self.session_factory() as db:
            for product_id, quantity in quantities.items():
                # warunkowy UPDATE: stan sprawdzany i zmieniany w jednym zapytaniu
                result = db.execute(
                    sql_update(ProductModel)
                    .where(ProductModel.id == product_id, ProductModel.inventory >= quantity)
                    .values(inventory=ProductModel.inventory - quantity)
                )
                if result.rowcount == 0:
                    db.rollback()
                    return False

            db.commit()
            return True

    # =====================================================
    # ORDERS
    # =====================================================
    def _select_orders(self, *criteria, order_by=None, limit=None) -> List[Order]:
        stmt = select(OrderModel).where(*criteria)
        stmt = stmt.order_by(*(order_by or [OrderModel.id]))
        if limit is not None:
            stmt = stmt.limit(limit)

        with self.session_factory() as db:
            return [Order.model_validate(r) for r in db.execute(stmt).scalars().all()]

    @db_retry()
    def get_orders(self) -> List[Order]:
        return self._select_orders()

    @db_retry()
    def get_order_by_id(self, order_id: int) -> Order | None:
        with self.session_factory() as db:
            row = db.get(OrderModel, order_id)
            return Order.model_validate(row) if row else None

    @db_retry()
    def get_orders_by_user_id(self, user_id: int) -> List[Order]:
        return self._select_orders(OrderModel.user_id == user_id)

    def create_order(self, order: InsertOrder, items: Iterable[InsertOrderItem]) -> Order:
        # zamówienie i pozycje w jednej transakcji: albo wszystko, albo nic
        with self.session_factory.begin() as db:
            row = OrderModel(created_at=self._clock(), **order.model_dump())
            db.add(row)
            db.flush()

            for item in items:
                db.add(OrderItemModel(order_id=row.id, **item.model_dump()))

            db.flush()
            db.refresh(row)
            return Order.model_validate(row)

    def update_order_status(self, order_id: int, status: str) -> Order | None:
        with self.session_factory() as db:
            row = db.get(OrderModel, order_id)
            if row is None:
                return None
            row.status = status
            db.commit()
            db.refresh(row)
            return Order.model_validate(row)

    @db_retry()
    def get_order_items_by_order_id(self, order_id: int) -> List[OrderItem]:
        with self.session_factory() as db:
            rows = db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars().all()
            return [OrderItem.model_validate(r) for r in rows]

    # =====================================================
    # ANALYTICS
    # =====================================================
    @db_retry()
    def get_recent_orders(self, limit: int) -> List[Order]:
        return self._select_orders(
            order_by=[OrderModel.created_at.desc(), OrderModel.id],
            limit=max(limit, 0),
        )

    @db_retry()
    def get_low_stock_products(self, threshold: int) -> List[Product]:
        with self.session_factory() as db:
            rows = db.execute(
                select(ProductModel)
                .where(ProductModel.inventory <= threshold)
                .order_by(ProductModel.inventory, ProductModel.id)
            ).scalars().all()
            return [Product.model_validate(r) for r in rows]

    @db_retry()
    def get_category_distribution(self) -> List[CategoryCount]:
        with self.session_factory() as db:
            rows = db.execute(
                select(ProductModel.category, func.count(ProductModel.id))
                .group_by(ProductModel.category)
            ).all()
            return [CategoryCount(category=c, count=n) for c, n in rows]
