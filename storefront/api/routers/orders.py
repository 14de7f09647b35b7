# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_local_storage, require_page_user, store_for
from storefront.data.database import get_db
from storefront.data.local_storage import LocalStorage
from storefront.domain.errors import BackendError
from storefront.domain.schemas import TrackedOrderOut
from storefront.services.order_service import OrderService
from storefront.services.session_store import SessionStore

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[TrackedOrderOut])
def order_history(
    session: SessionStore = Depends(require_page_user),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_local_storage),
):
    """Orders of the signed-in identity, newest first."""
    return OrderService(store_for(session, db, storage)).list_orders()


@router.get("/{order_id}", response_model=TrackedOrderOut)
def order_confirmation(
    order_id: str,
    session: SessionStore = Depends(require_page_user),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_local_storage),
):
    svc = OrderService(store_for(session, db, storage))
    try:
        return svc.get_order(order_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
