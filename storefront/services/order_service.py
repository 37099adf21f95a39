# storefront/services/order_service.py
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.mappers import order_from_row, order_to_row
from storefront.domain.entities import Order, OrderStatus
from storefront.domain.errors import BackendError, NotFoundError
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Zamowienie jest niezmienne po utworzeniu, poza statusem i flaga whatsapp_sent.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    #commands
    def create_order(self, order: Order) -> Order:
        try:
            created = self.repo.create_order(order_to_row(order))
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zapisu zamowienia {order.order_number}: {e}")
            raise BackendError("Erro ao salvar pedido. Tente novamente.") from e

        logger.info(f"Order {created.order_number} created (id={created.id}, total={created.total})")
        return order_from_row(created)

    def mark_whatsapp_sent(self, order_id: int) -> Order:
        try:
            updated = self.repo.update_order(order_id, whatsapp_sent=True)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Nie udalo sie oznaczyc zamowienia {order_id} jako wyslane: {e}")
            raise BackendError("Erro ao atualizar pedido.") from e

        if updated is None:
            raise NotFoundError("Pedido não encontrado")
        return order_from_row(updated)

    def update_status(self, order_id: int, status: OrderStatus) -> Order:
        try:
            updated = self.repo.update_order(order_id, status=status.value)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zmiany statusu zamowienia {order_id}: {e}")
            raise BackendError("Erro ao atualizar status do pedido.") from e

        if updated is None:
            raise NotFoundError("Pedido não encontrado")

        logger.info(f"Order {updated.order_number} -> {status.value}")
        return order_from_row(updated)

    #query
    def get_order(self, order_id: int) -> Order:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Pedido não encontrado")
        return order_from_row(order)

    def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        rows = self.repo.list_orders(status.value if status else None)
        return [order_from_row(r) for r in rows]
