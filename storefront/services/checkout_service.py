# storefront/services/checkout_service.py
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from redis.exceptions import RedisError

from storefront.domain import checkout
from storefront.domain import pricing
from storefront.domain.checkout import CheckoutState, CheckoutStep, StorefrontSession
from storefront.domain.entities import Cart, DeliveryType, Order, StoreSettings
from storefront.domain.errors import BackendError, CheckoutStepError, EmptyCartError
from storefront.domain.order_message import format_order_message, generate_order_number
from storefront.data.database import utcnow
from storefront.repos.session_repo import SessionRepo
from storefront.services.handoff_service import WhatsAppHandoff
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.settings_service import SettingsService
from storefront.utils.settings import ORDER_NUMBER_PREFIX, SUBMIT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CheckoutResult:
    order: Order
    whatsapp_url: Optional[str]


class CheckoutService:
    """
    Checkout w trzech krokach: cart_review -> delivery_selection -> customer_info.
    Stan trzymany w sesji razem z koszykiem.
    """

    def __init__(
        self,
        sessions: SessionRepo,
        settings_service: SettingsService,
        order_service: OrderService,
        handoff: WhatsAppHandoff,
        lock_service: LockService,
        notifier: NotificationService | None = None,
    ):
        self.sessions = sessions
        self.settings_service = settings_service
        self.order_service = order_service
        self.handoff = handoff
        self.lock_service = lock_service
        self.notifier = notifier or NotificationService()
        self._submit_guard = threading.Lock()

    def _load(self, session_id: str, settings: StoreSettings) -> StorefrontSession:
        session = self.sessions.load(session_id)
        state = session.checkout
        delivery = settings.delivery

        # opcja wylaczona w miedzyczasie w panelu -> wracamy do domyslnej
        if state.delivery_type is None or state.delivery_type not in checkout.enabled_options(delivery):
            state.delivery_type = checkout.default_delivery_type(delivery)
            state.neighborhood_id = None
        elif delivery.neighborhood_rates.find(state.neighborhood_id) is None:
            state.neighborhood_id = None

        state.delivery_fee = pricing.delivery_fee(state.delivery_type, state.neighborhood_id, delivery)
        return session

    #query
    def get_state(self, session_id: str) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        return self._load(session_id, settings)

    #commands
    def next_step(self, session_id: str) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        checkout.next_step(session.checkout, session.cart)
        self.sessions.save(session_id, session)
        return session

    def prev_step(self, session_id: str) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        checkout.prev_step(session.checkout)
        self.sessions.save(session_id, session)
        return session

    def select_delivery(self, session_id: str, delivery_type: DeliveryType) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        checkout.select_delivery(session.checkout, delivery_type, settings.delivery)
        self.sessions.save(session_id, session)
        return session

    def select_neighborhood(self, session_id: str, neighborhood_id: Optional[str]) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        checkout.select_neighborhood(session.checkout, neighborhood_id, settings.delivery)
        self.sessions.save(session_id, session)
        return session

    def update_form(self, session_id: str, values: Dict[str, Any]) -> StorefrontSession:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        self._apply_form(session.checkout, values)
        self.sessions.save(session_id, session)
        return session

    @staticmethod
    def _apply_form(state: CheckoutState, values: Dict[str, Any]) -> None:
        data = state.form.model_dump()
        data.update({k: v for k, v in values.items() if v is not None})
        if data.get("phone"):
            data["phone"] = checkout.format_phone(data["phone"])
        state.form = checkout.CustomerForm(**data)

    def submit_order(self, session_id: str, form: Dict[str, Any] | None = None) -> CheckoutResult | None:
        """
        Use Case: wyslanie zamowienia.

        1. Blokada w procesie + blokada sesji w redisie (jedno zamowienie w locie)
        2. Walidacja danych klienta
        3. Zapis zamowienia
        4. Link do WhatsApp, oznaczenie jako wyslane (best effort, whatsapp_url moze byc None)
        5. Czyszczenie koszyka i reset checkoutu

        Zwraca None gdy inna wysylka dla tej sesji juz trwa.
        """
        # w obrebie procesu: drugi submit na tym samym serwisie nic nie robi
        if not self._submit_guard.acquire(blocking=False):
            logger.warning(f"Wysylka zamowienia dla sesji {session_id} juz trwa (proces)")
            return None

        try:
            token = str(uuid.uuid4())
            if not self.lock_service.acquire_submit_lock(session_id, token, SUBMIT_LOCK_TTL_SECONDS):
                logger.warning(f"Wysylka zamowienia dla sesji {session_id} juz trwa")
                return None

            try:
                return self._submit(session_id, form)
            finally:
                self._release(session_id, token)
        finally:
            self._submit_guard.release()

    def _release(self, session_id: str, token: str) -> None:
        # lock i tak wygasnie po TTL, blad zwalniania nie psuje wyniku
        try:
            self.lock_service.release_submit_lock(session_id, token)
        except RedisError as e:
            logger.warning(f"Nie udalo sie zwolnic blokady wysylki dla sesji {session_id}: {e}")

    def _submit(self, session_id: str, form: Dict[str, Any] | None) -> CheckoutResult:
        settings = self.settings_service.get_settings()
        session = self._load(session_id, settings)
        state = session.checkout

        if state.step != CheckoutStep.CUSTOMER_INFO:
            raise CheckoutStepError("Finalize as etapas anteriores antes de enviar o pedido.")
        if not session.cart.items:
            raise EmptyCartError()

        if form:
            self._apply_form(state, form)
            # formularz zostaje w sesji nawet jak walidacja nie przejdzie
            self.sessions.save(session_id, session)

        customer = checkout.validate_customer(state)
        store_number = self.handoff.ensure_configured(settings.whatsapp_number)

        delivery_option = checkout.build_delivery_option(state, settings.delivery)
        subtotal = pricing.cart_subtotal(session.cart.items)
        order = Order(
            order_number=generate_order_number(ORDER_NUMBER_PREFIX),
            customer=customer,
            items=session.cart.items,
            subtotal=subtotal,
            delivery_option=delivery_option,
            total=pricing.order_total(subtotal, delivery_option.fee),
            notes=state.form.notes.strip() or None,
            created_at=utcnow(),
        )

        created = self.order_service.create_order(order)

        # od tego momentu zamowienie jest w bazie: handoff best effort, koszyk i tak czyscimy
        url = None
        try:
            message = format_order_message(created, settings.store_name)
            url = self.handoff.build_url(store_number, message)
        except Exception as e:
            logger.error(f"Nie udalo sie zbudowac linku WhatsApp dla zamowienia {created.order_number}: {e}")

        if url is not None:
            try:
                created = self.order_service.mark_whatsapp_sent(created.id)
            except BackendError as e:
                logger.error(f"Nie udalo sie oznaczyc zamowienia {created.order_number} jako wyslane: {e}")

        self.notifier.send_order_notification(created.order_number, str(created.total))

        session.cart = Cart()
        session.checkout = checkout.fresh_state(settings.delivery)
        self.sessions.save(session_id, session)

        logger.info(f"Zamowienie {created.order_number} wyslane dla sesji {session_id}")
        return CheckoutResult(order=created, whatsapp_url=url)
