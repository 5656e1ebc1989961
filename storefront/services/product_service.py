# storefront/services/product_service.py
from typing import List

from storefront.domain.schemas import InsertProduct, Product, ProductUpdate
from storefront.repos.base import Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, storage: Storage):
        self.repo = storage

    def list_products(self, category: str | None = None, search: str | None = None) -> List[Product]:
        if search:
            products = self.repo.search_products(search)
            if category:
                products = [p for p in products if p.category.lower() == category.lower()]
            return products
        if category:
            return self.repo.get_products_by_category_name(category)
        return self.repo.get_products()

    def featured(self) -> List[Product]:
        return self.repo.get_featured_products()

    def get_product(self, product_id: int) -> Product:
        product = self.repo.get_product_by_id(product_id)
        if not product:
            raise ValueError("Produkt nie istnieje")
        return product

    def create_product(self, payload: InsertProduct) -> Product:
        created = self.repo.create_product(payload)
        logger.info(f"Product {created.id} ({created.sku}) created")
        return created

    def update_product(self, product_id: int, payload: ProductUpdate) -> Product:
        updated = self.repo.update_product(product_id, payload)
        if not updated:
            raise ValueError("Produkt nie istnieje")
        logger.info(f"Product {product_id} updated: {sorted(payload.model_fields_set)}")
        return updated

    def delete_product(self, product_id: int):
        if not self.repo.delete_product(product_id):
            raise ValueError("Produkt nie istnieje")
        logger.info(f"Product {product_id} deleted")
