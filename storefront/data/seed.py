# storefront/data/seed.py
from decimal import Decimal

from storefront.domain.schemas import InsertProduct, InsertUser
from storefront.repos.base import Storage
from storefront.services.credentials import hash_password
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_USERNAME
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_IMG = "https://images.unsplash.com/photo-{}?ixlib=rb-1.2.1&auto=format&fit=crop&w=400&h=500&q=80"

SAMPLE_PRODUCTS = [
    InsertProduct(
        name="Premium Headphones",
        description="Superior sound quality for music lovers. Features active noise cancellation and 20 hour battery life.",
        price=Decimal("149.99"),
        image_url=_IMG.format("1560343090-f0409e92791a"),
        category="Electronics",
        inventory=23,
        sku="HP-100-BK",
        featured=True,
    ),
    InsertProduct(
        name="Smartwatch Pro",
        description="Track fitness and stay connected with this premium smartwatch. Features heart rate monitoring and GPS.",
        price=Decimal("299.99"),
        image_url=_IMG.format("1523275335684-37898b6baf30"),
        category="Electronics",
        inventory=15,
        sku="SW-200-SL",
        featured=True,
    ),
    InsertProduct(
        name="Wireless Earbuds",
        description="True wireless earbuds with crystal clear sound and 8 hour battery life. Perfect for workouts and daily use.",
        price=Decimal("89.99"),
        image_url=_IMG.format("1590658268037-6bf12165a8df"),
        category="Electronics",
        inventory=42,
        sku="EB-300-WH",
        featured=False,
    ),
    InsertProduct(
        name="Laptop Stand",
        description="Ergonomic laptop stand that improves posture and provides better airflow. Adjustable height and angle.",
        price=Decimal("49.99"),
        image_url=_IMG.format("1586953208448-b95a79798f07"),
        category="Accessories",
        inventory=18,
        sku="LS-400-AL",
        featured=False,
    ),
    InsertProduct(
        name="Mechanical Keyboard",
        description="Premium mechanical keyboard with Cherry MX switches. Perfect for gaming and typing with satisfying tactile feedback.",
        price=Decimal("129.99"),
        image_url=_IMG.format("1541140532154-b024d705b90a"),
        category="Accessories",
        inventory=12,
        sku="KB-500-MX",
        featured=True,
    ),
    InsertProduct(
        name="Gaming Mouse",
        description="High-precision gaming mouse with customizable RGB lighting and programmable buttons. 25,600 DPI sensor.",
        price=Decimal("79.99"),
        image_url=_IMG.format("1527864550417-7fd91fc51a46"),
        category="Accessories",
        inventory=31,
        sku="GM-600-RGB",
        featured=False,
    ),
]


def seed(storage: Storage) -> bool:
    # not forcing: only seed if empty
    if storage.get_products():
        return False

    if storage.get_user_by_username(ADMIN_USERNAME) is None:
        storage.create_user(
            InsertUser(
                username=ADMIN_USERNAME,
                email=ADMIN_EMAIL,
                password=hash_password(ADMIN_PASSWORD),
                full_name="Admin User",
                is_admin=True,
            )
        )

    for product in SAMPLE_PRODUCTS:
        storage.create_product(product)

    logger.info(f"Seeded admin '{ADMIN_USERNAME}' and {len(SAMPLE_PRODUCTS)} sample products")
    return True
