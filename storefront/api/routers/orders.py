# storefront/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.entities import Order, OrderStatus
from storefront.domain.errors import BackendError, NotFoundError
from storefront.domain.schemas import OrderStatusIn, OrderSummaryOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin/orders", tags=["admin-orders"], dependencies=[Depends(require_admin)])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderSummaryOut])
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Lista zamowien, najnowsze na gorze.
    """
    svc = get_service(db)
    return [
        OrderSummaryOut(
            id=o.id,
            order_number=o.order_number,
            customer_name=o.customer.name,
            total=o.total,
            status=o.status,
            whatsapp_sent=o.whatsapp_sent,
            created_at=o.created_at,
        )
        for o in svc.list_orders(status)
    ]


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: int, db: Session = Depends(get_db)):
    """
    Pobiera szczegóły zamówienia.
    """
    svc = get_service(db)
    try:
        return svc.get_order(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=Order)
def update_status(order_id: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
