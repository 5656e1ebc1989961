import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from storefront.data.seed import SAMPLE_PRODUCTS, seed
from storefront.domain.schemas import CheckoutItemIn, ProductUpdate, UserCreate
from storefront.services.analytics_service import AnalyticsService
from storefront.services.credentials import verify_password
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService


def _signup(**overrides):
    data = dict(username="alice", email="alice@example.com", password="pw123", full_name="Alice")
    data.update(overrides)
    return UserCreate(**data)


# =====================================================
# USERS
# =====================================================
def test_register_hashes_password(mem_storage):
    user = UserService(mem_storage).register(_signup())

    assert user.password != "pw123"
    assert verify_password("pw123", user.password)
    assert user.is_admin is False


def test_register_rejects_duplicates(mem_storage):
    service = UserService(mem_storage)
    service.register(_signup())

    with pytest.raises(ValueError, match="Nazwa użytkownika"):
        service.register(_signup(email="other@example.com"))
    with pytest.raises(ValueError, match="Email jest już"):
        service.register(_signup(username="alice2"))


def test_authenticate(mem_storage):
    service = UserService(mem_storage)
    created = service.register(_signup())

    assert service.authenticate("alice", "pw123").id == created.id
    assert service.authenticate("alice", "wrong") is None
    assert service.authenticate("nobody", "pw123") is None


def test_authenticate_unknown_user_still_runs_kdf(mem_storage, monkeypatch):
    checked = []

    def recording_verify(supplied, stored):
        checked.append(stored)
        return verify_password(supplied, stored)

    monkeypatch.setattr("storefront.services.user_service.verify_password", recording_verify)

    assert UserService(mem_storage).authenticate("nobody", "pw123") is None
    assert len(checked) == 1
    assert "." in checked[0]


def test_get_user_not_found(mem_storage):
    with pytest.raises(ValueError, match="Użytkownik nie istnieje"):
        UserService(mem_storage).get_user(1)


# =====================================================
# PRODUCTS
# =====================================================
def test_list_products_filters(mem_storage, make_product):
    service = ProductService(mem_storage)
    phones = service.create_product(make_product(name="Premium Headphones", category="Electronics", sku="A"))
    service.create_product(make_product(name="Head Lamp", category="Outdoor", sku="B"))
    service.create_product(make_product(name="Desk", category="Furniture", sku="C"))

    assert len(service.list_products()) == 3
    assert [p.sku for p in service.list_products(category="electronics")] == ["A"]
    assert [p.sku for p in service.list_products(search="head")] == ["A", "B"]
    assert [p.id for p in service.list_products(category="Electronics", search="head")] == [phones.id]


def test_product_not_found(mem_storage):
    service = ProductService(mem_storage)

    with pytest.raises(ValueError):
        service.get_product(1)
    with pytest.raises(ValueError):
        service.update_product(1, ProductUpdate(name="x"))
    with pytest.raises(ValueError):
        service.delete_product(1)


# =====================================================
# ORDERS
# =====================================================
def test_place_order_snapshots_price_and_decrements_stock(mem_storage, make_product, make_user):
    user = mem_storage.create_user(make_user())
    product = mem_storage.create_product(make_product(price=Decimal("4.00"), inventory=10))
    service = OrderService(mem_storage)

    out = service.place_order(
        user.id,
        [CheckoutItemIn(product_id=product.id, quantity=2), CheckoutItemIn(product_id=product.id, quantity=1)],
    )
    mem_storage.update_product(product.id, {"price": Decimal("99.00")})

    assert out.status == "pending"
    assert out.total == Decimal("12.00")
    assert [(i.quantity, i.price) for i in out.items] == [(3, Decimal("4.00"))]
    assert mem_storage.get_product_by_id(product.id).inventory == 7
    assert service.get_order(out.id, user).total == Decimal("12.00")


def test_place_order_rejects_unknown_product_and_short_stock(mem_storage, make_product, make_user):
    user = mem_storage.create_user(make_user())
    product = mem_storage.create_product(make_product(inventory=1))
    service = OrderService(mem_storage)

    with pytest.raises(ValueError, match="nie istnieje"):
        service.place_order(user.id, [CheckoutItemIn(product_id=999, quantity=1)])
    with pytest.raises(ValueError, match="Brak wystarczającej ilości"):
        service.place_order(user.id, [CheckoutItemIn(product_id=product.id, quantity=2)])

    assert mem_storage.get_orders() == []
    assert mem_storage.get_product_by_id(product.id).inventory == 1


def test_concurrent_checkouts_never_oversell(mem_storage, make_product, monkeypatch):
    product = mem_storage.create_product(make_product(inventory=5))
    original_get = mem_storage.get_product_by_id

    def slow_get(product_id):
        time.sleep(0.001)
        return original_get(product_id)

    monkeypatch.setattr(mem_storage, "get_product_by_id", slow_get)

    def buy(user_id):
        try:
            OrderService(mem_storage).place_order(user_id, [CheckoutItemIn(product_id=product.id, quantity=1)])
            return True
        except ValueError:
            return False

    with ThreadPoolExecutor(max_workers=20) as pool:
        results = list(pool.map(buy, range(1, 21)))

    assert results.count(True) == 5
    assert len(mem_storage.get_orders()) == 5
    assert original_get(product.id).inventory == 0


def test_order_access_rules(mem_storage, make_product, make_user):
    owner = mem_storage.create_user(make_user("owner"))
    other = mem_storage.create_user(make_user("other"))
    admin = mem_storage.create_user(make_user("boss", is_admin=True))
    product = mem_storage.create_product(make_product())
    service = OrderService(mem_storage)
    order = service.place_order(owner.id, [CheckoutItemIn(product_id=product.id, quantity=1)])

    assert service.get_order(order.id, owner).id == order.id
    assert service.get_order(order.id, admin).id == order.id
    with pytest.raises(PermissionError):
        service.get_order(order.id, other)
    with pytest.raises(ValueError):
        service.get_order(999, admin)

    assert [o.id for o in service.list_orders(owner)] == [order.id]
    assert service.list_orders(other) == []
    assert len(service.list_orders(admin)) == 1


def test_update_status_unknown_order(mem_storage):
    service = OrderService(mem_storage)

    with pytest.raises(ValueError):
        service.update_status(1, "shipped")


# =====================================================
# ANALYTICS / SEED
# =====================================================
def test_analytics_defaults(mem_storage, make_product, monkeypatch):
    monkeypatch.setattr("storefront.services.analytics_service.LOW_STOCK_THRESHOLD", 3)
    mem_storage.create_product(make_product(sku="A", inventory=3))
    mem_storage.create_product(make_product(sku="B", inventory=4))
    service = AnalyticsService(mem_storage)

    assert [p.sku for p in service.low_stock()] == ["A"]
    assert [p.sku for p in service.low_stock(10)] == ["A", "B"]
    assert service.recent_orders() == []


def test_seed_only_when_empty(storage):
    assert seed(storage) is True
    assert len(storage.get_products()) == len(SAMPLE_PRODUCTS)
    assert storage.get_user_by_username("admin").is_admin

    assert seed(storage) is False
    assert len(storage.get_products()) == len(SAMPLE_PRODUCTS)


def test_seeded_catalog_search(storage):
    seed(storage)

    assert [p.name for p in storage.search_products("head")] == ["Premium Headphones"]
    assert {p.name for p in storage.get_featured_products()} == {
        "Premium Headphones", "Smartwatch Pro", "Mechanical Keyboard",
    }
    counts = {c.category: c.count for c in storage.get_category_distribution()}
    assert counts == {"Electronics": 3, "Accessories": 3}
