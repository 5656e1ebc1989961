# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from storefront.api.deps import get_storage, require_admin
from storefront.domain.schemas import InsertProduct, Product, ProductUpdate
from storefront.repos.base import Storage
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(storage: Storage):
    return ProductService(storage)


@router.get("", response_model=List[Product])
def list_products(
    category: str | None = Query(None),
    search: str | None = Query(None),
    storage: Storage = Depends(get_storage),
):
    return get_service(storage).list_products(category=category, search=search)


@router.get("/featured", response_model=List[Product])
def featured_products(storage: Storage = Depends(get_storage)):
    return get_service(storage).featured()


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    try:
        return get_service(storage).get_product(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=Product, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: InsertProduct, storage: Storage = Depends(get_storage)):
    return get_service(storage).create_product(payload)


@router.patch("/{product_id}", response_model=Product, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductUpdate, storage: Storage = Depends(get_storage)):
    try:
        return get_service(storage).update_product(product_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, storage: Storage = Depends(get_storage)):
    try:
        get_service(storage).delete_product(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
