# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienie obslugi sklepu o nowym zamowieniu.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(order_number: str, total: str):
        # best effort - brak brokera nie moze zablokowac checkoutu
        try:
            send_order_notification_task.delay(order_number, total)
        except Exception as e:
            logger.warning(f"Nie udalo sie zakolejkowac powiadomienia dla zamowienia {order_number}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_number: str, total: str):
    """
    Celery task - loguje nowe zamowienie dla obslugi sklepu.
    """
    logger.info(f"[NOTIFICATION] Novo pedido #{order_number}, total {total}")

    return {"order_number": order_number, "total": total, "status": "sent"}
