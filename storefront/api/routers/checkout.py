# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_local_storage, redirect_to, require_page_user, store_for
from storefront.data.database import get_db
from storefront.data.local_storage import LocalStorage
from storefront.domain.errors import BackendError, EmptyCartError, PartialOrderError
from storefront.domain.schemas import CheckoutIn, CheckoutOut, PlacedOrderOut
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.checkout_service import CheckoutService
from storefront.services.session_store import SessionStore

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(
    session: SessionStore = Depends(require_page_user),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_local_storage),
) -> CheckoutService:
    store = store_for(session, db, storage)
    return CheckoutService(store, CartService(store, CatalogService(db)))


@router.get("", response_model=CheckoutOut)
def checkout_form(
    session: SessionStore = Depends(require_page_user),
    svc: CheckoutService = Depends(get_service),
):
    try:
        return svc.prepare(session.profile)
    except EmptyCartError:
        raise redirect_to("/cart")
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("", response_model=PlacedOrderOut, status_code=201)
def place_order(payload: CheckoutIn, svc: CheckoutService = Depends(get_service)):
    """
    Places a cash-on-delivery order from the current cart.
    redirect_to in the response points at the confirmation view.
    """
    try:
        return svc.place_order(payload)
    except EmptyCartError:
        raise redirect_to("/cart")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PartialOrderError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "order_id": e.order_id})
    except BackendError:
        raise HTTPException(status_code=502, detail="Failed to place order. Please try again.")
