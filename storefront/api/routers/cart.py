# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_local_storage, require_user, store_for
from storefront.data.database import get_db
from storefront.data.local_storage import LocalStorage
from storefront.domain.errors import BackendError
from storefront.domain.schemas import AddToCartIn, CartOut, UpdateQuantityIn
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.session_store import SessionStore

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    session: SessionStore = Depends(require_user),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_local_storage),
) -> CartService:
    return CartService(store_for(session, db, storage), CatalogService(db))


@router.get("", response_model=CartOut)
def get_cart(svc: CartService = Depends(get_service)):
    try:
        return svc.get_cart()
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(payload: AddToCartIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_to_cart(payload.product_id, payload.size, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError:
        raise HTTPException(status_code=502, detail="Failed to add item to cart")


@router.patch("/items/{line_id}", response_model=CartOut)
def update_quantity(line_id: str, payload: UpdateQuantityIn, svc: CartService = Depends(get_service)):
    try:
        return svc.update_quantity(line_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/items/{line_id}/increment", response_model=CartOut)
def increment(line_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.increment(line_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/items/{line_id}/decrement", response_model=CartOut)
def decrement(line_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.decrement(line_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/items/{line_id}", response_model=CartOut)
def remove_item(line_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.remove(line_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
