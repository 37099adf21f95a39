# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from storefront.api.deps import get_session_id
from storefront.data.database import get_db
from storefront.data.redis_client import get_redis
from storefront.domain import pricing
from storefront.domain.checkout import StorefrontSession
from storefront.domain.errors import (
    BackendError,
    CheckoutValidationError,
    HandoffConfigError,
    NotFoundError,
)
from storefront.domain.schemas import (
    CheckoutOut,
    CustomerFormIn,
    DeliverySelectIn,
    NeighborhoodSelectIn,
    SubmitOut,
)
from storefront.repos.session_repo import SessionRepo
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.services.checkout_service import CheckoutService
from storefront.services.handoff_service import WhatsAppHandoff
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.settings_service import SettingsService
from storefront.utils.settings import CART_TTL_SECONDS, CATALOG_CACHE_TTL_SECONDS

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_service(db: Session, redis_client):
    return CheckoutService(
        sessions=SessionRepo(redis_client, CART_TTL_SECONDS),
        settings_service=SettingsService(db, SnapshotRepo(redis_client, CATALOG_CACHE_TTL_SECONDS)),
        order_service=OrderService(db),
        handoff=WhatsAppHandoff(),
        lock_service=LockService(redis_client),
    )


def _out(session: StorefrontSession) -> CheckoutOut:
    state = session.checkout
    return CheckoutOut(
        step=state.step,
        delivery_type=state.delivery_type,
        neighborhood_id=state.neighborhood_id,
        delivery_fee=state.delivery_fee,
        subtotal=session.cart.subtotal,
        total=pricing.order_total(session.cart.subtotal, state.delivery_fee),
        form=state.form,
        cart=session.cart,
    )


def _run(fn, *args):
    # bledy domenowe -> kody HTTP
    try:
        return fn(*args)
    except CheckoutValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except HandoffConfigError as e:
        # brak numeru sklepu to problem konfiguracji, nie danych klienta
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except RedisError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("", response_model=CheckoutOut)
def get_checkout(
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.get_state, session_id))


@router.post("/next", response_model=CheckoutOut)
def next_step(
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.next_step, session_id))


@router.post("/back", response_model=CheckoutOut)
def prev_step(
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.prev_step, session_id))


@router.put("/delivery", response_model=CheckoutOut)
def select_delivery(
    payload: DeliverySelectIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.select_delivery, session_id, payload.delivery_type))


@router.put("/neighborhood", response_model=CheckoutOut)
def select_neighborhood(
    payload: NeighborhoodSelectIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.select_neighborhood, session_id, payload.neighborhood_id))


@router.patch("/form", response_model=CheckoutOut)
def update_form(
    payload: CustomerFormIn,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    svc = get_service(db, redis_client)
    return _out(_run(svc.update_form, session_id, payload.model_dump(exclude_none=True)))


@router.post("/submit", response_model=SubmitOut, status_code=201)
def submit_order(
    payload: CustomerFormIn | None = None,
    session_id: str = Depends(get_session_id),
    db: Session = Depends(get_db),
    redis_client=Depends(get_redis),
):
    """
    Zapisuje zamowienie i zwraca link wa.me z gotowa wiadomoscia.
    Frontend otwiera link w nowej karcie.
    """
    svc = get_service(db, redis_client)
    form = payload.model_dump(exclude_none=True) if payload else None
    result = _run(svc.submit_order, session_id, form)
    if result is None:
        raise HTTPException(status_code=409, detail="Pedido já está sendo enviado")

    return SubmitOut(
        order_number=result.order.order_number,
        total=result.order.total,
        whatsapp_url=result.whatsapp_url,
        order=result.order,
    )
