# storefront/api/routers/catalog.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.redis_client import get_redis
from storefront.domain.entities import Category, Product, StoreSettings
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.services.catalog_service import CatalogService
from storefront.services.settings_service import SettingsService
from storefront.utils.settings import CATALOG_CACHE_TTL_SECONDS

router = APIRouter(tags=["catalog"])


def get_service(db: Session, redis_client):
    return CatalogService(db, SnapshotRepo(redis_client, CATALOG_CACHE_TTL_SECONDS))


@router.get("/products", response_model=List[Product])
def list_products(
    category_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return svc.list_products(category_id)


@router.get("/products/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    product = svc.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Produto não encontrado")
    return product


@router.get("/categories", response_model=List[Category])
def list_categories(db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    svc = get_service(db, redis_client)
    return svc.list_categories()


@router.get("/store", response_model=StoreSettings)
def get_store_settings(db: Session = Depends(get_db), redis_client=Depends(get_redis)):
    """Publiczne ustawienia sklepu (nazwa, kolory, opcje dostawy)."""
    svc = SettingsService(db, SnapshotRepo(redis_client, CATALOG_CACHE_TTL_SECONDS))
    return svc.get_settings()
