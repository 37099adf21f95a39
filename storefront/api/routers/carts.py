# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from storefront.api.deps import get_session_id
from storefront.data.database import get_db
from storefront.data.redis_client import get_redis
from storefront.domain.entities import Cart
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import AddItemIn, UpdateQuantityIn
from storefront.repos.session_repo import SessionRepo
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.utils.settings import CART_TTL_SECONDS, CATALOG_CACHE_TTL_SECONDS

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session, redis_client):
    return CartService(
        sessions=SessionRepo(redis_client, CART_TTL_SECONDS),
        catalog=CatalogService(db, SnapshotRepo(redis_client, CATALOG_CACHE_TTL_SECONDS)),
    )


@router.get("", response_model=Cart)
def get_cart(
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.get_cart(session_id)
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/items", response_model=Cart)
def add_item(
    payload: AddItemIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.add_product(
            session_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            selections=[(s.group_id, s.option_id) for s in payload.selections],
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.patch("/items/{item_id}", response_model=Cart)
def update_quantity(
    item_id: str,
    payload: UpdateQuantityIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.update_quantity(session_id, item_id, payload.quantity)
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/items/{item_id}", response_model=Cart)
def remove_item(
    item_id: str,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.remove_item(session_id, item_id)
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("", response_model=Cart)
def clear_cart(
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    try:
        return svc.clear_cart(session_id)
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))
