# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_storage, require_admin
from storefront.domain.schemas import CategoryCount, Order, Product, RevenueStats
from storefront.repos.base import Storage
from storefront.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/recent-orders", response_model=List[Order])
def recent_orders(limit: int | None = Query(None, ge=0), storage: Storage = Depends(get_storage)):
    return AnalyticsService(storage).recent_orders(limit)


@router.get("/low-stock", response_model=List[Product])
def low_stock(threshold: int | None = Query(None), storage: Storage = Depends(get_storage)):
    return AnalyticsService(storage).low_stock(threshold)


@router.get("/revenue", response_model=RevenueStats)
def revenue(storage: Storage = Depends(get_storage)):
    return AnalyticsService(storage).revenue()


@router.get("/categories", response_model=List[CategoryCount])
def categories(storage: Storage = Depends(get_storage)):
    return AnalyticsService(storage).category_distribution()
