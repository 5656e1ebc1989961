# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_current_user, get_storage, require_admin
from storefront.domain.schemas import CheckoutIn, OrderOut, OrderStatusIn, User
from storefront.repos.base import Storage
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(storage: Storage):
    return OrderService(storage)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: CheckoutIn,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Tworzy zamówienie z pozycji koszyka zalogowanego użytkownika.
    """
    svc = get_service(storage)
    try:
        return svc.place_order(user.id, payload.items)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut])
def list_orders(user: User = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    return get_service(storage).list_orders(user)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Pobiera szczegóły zamówienia (właściciel albo admin).
    """
    svc = get_service(storage)
    try:
        return svc.get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_order_status(order_id: int, payload: OrderStatusIn, storage: Storage = Depends(get_storage)):
    svc = get_service(storage)
    try:
        return svc.update_status(order_id, payload.status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
