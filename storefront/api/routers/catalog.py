# storefront/api/routers/catalog.py
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.enums import SortKey
from storefront.domain.errors import BackendError
from storefront.domain.schemas import (
    CategoryOut,
    CategoryPageOut,
    HomeOut,
    ProductFilters,
    ProductOut,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/", response_model=HomeOut)
def home(db: Session = Depends(get_db)):
    return CatalogService(db).home()


@router.get("/products", response_model=List[ProductOut])
def list_products(
    category: str = "",
    search: str = "",
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    availability: Literal["all", "in-stock"] = "all",
    sort: SortKey = SortKey.NEWEST,
    db: Session = Depends(get_db),
):
    filters = ProductFilters(
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=availability == "in-stock",
        sort=sort,
    )
    return CatalogService(db).list_products(filters)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(product_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()


@router.get("/categories/{slug}", response_model=CategoryPageOut)
def category_page(slug: str, sort: SortKey = SortKey.NEWEST, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).category_page(slug, sort)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
