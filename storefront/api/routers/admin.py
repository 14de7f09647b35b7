# storefront/api/routers/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_local_storage, require_admin, store_for
from storefront.data.database import get_db
from storefront.data.local_storage import LocalStorage
from storefront.domain.enums import OrderStatus
from storefront.domain.errors import BackendError
from storefront.domain.schemas import (
    AdminProductOut,
    DashboardStats,
    OrderOut,
    OrderStatusUpdate,
    ProductIn,
    ProductOut,
)
from storefront.services.admin_service import AdminService
from storefront.services.session_store import SessionStore

router = APIRouter(prefix="/admin", tags=["admin"])


def get_service(
    session: SessionStore = Depends(require_admin),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_local_storage),
) -> AdminService:
    return AdminService(db, store_for(session, db, storage))


@router.get("", response_model=DashboardStats)
def dashboard(svc: AdminService = Depends(get_service)):
    return svc.dashboard()


# products

@router.get("/products", response_model=List[AdminProductOut])
def list_products(search: str = "", svc: AdminService = Depends(get_service)):
    return svc.list_products(search)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, svc: AdminService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.create_product(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.update_product(product_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, svc: AdminService = Depends(get_service)):
    try:
        svc.delete_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return Response(status_code=204)


# orders

@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = None,
    search: str = "",
    svc: AdminService = Depends(get_service),
):
    return svc.list_orders(status.value if status else None, search)


@router.patch("/orders/{order_id}", response_model=List[OrderOut])
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    svc: AdminService = Depends(get_service),
):
    """Sets any status, returns the refreshed order list."""
    try:
        return svc.update_order_status(order_id, payload.status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError:
        raise HTTPException(status_code=502, detail="Failed to update order status")
