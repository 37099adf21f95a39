# storefront/domain/checkout.py
import re
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from storefront.domain.entities import (
    ZERO,
    Address,
    Cart,
    Customer,
    DeliveryOption,
    DeliverySettings,
    DeliveryType,
)
from storefront.domain.errors import (
    CheckoutValidationError,
    DeliverySelectionError,
    EmptyCartError,
)
from storefront.domain import pricing
from storefront.domain.order_message import format_currency

PHONE_PATTERN = re.compile(r"^\(\d{2}\) \d{5}-\d{4}$")
MIN_NAME_LENGTH = 3


class CheckoutStep(str, Enum):
    CART_REVIEW = "cart_review"
    DELIVERY_SELECTION = "delivery_selection"
    CUSTOMER_INFO = "customer_info"


class CustomerForm(BaseModel):
    name: str = ""
    phone: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    district: str = ""
    notes: str = ""


class CheckoutState(BaseModel):
    step: CheckoutStep = CheckoutStep.CART_REVIEW
    delivery_type: Optional[DeliveryType] = None
    neighborhood_id: Optional[str] = None
    delivery_fee: Decimal = ZERO
    form: CustomerForm = Field(default_factory=CustomerForm)


class StorefrontSession(BaseModel):
    """To co przegladarka trzymala w localStorage: koszyk + stan checkoutu."""

    cart: Cart = Field(default_factory=Cart)
    checkout: CheckoutState = Field(default_factory=CheckoutState)


# =====================================================
# DOSTAWA
# =====================================================
def enabled_options(settings: DeliverySettings) -> list:
    options = []
    if settings.pickup.enabled:
        options.append(DeliveryType.PICKUP)
    if settings.fixed_rate.enabled:
        options.append(DeliveryType.FIXED_RATE)
    if settings.neighborhood_rates.enabled and settings.neighborhood_rates.neighborhoods:
        options.append(DeliveryType.NEIGHBORHOOD)
    return options


def default_delivery_type(settings: DeliverySettings) -> Optional[DeliveryType]:
    options = enabled_options(settings)
    return options[0] if options else None


def select_delivery(
    state: CheckoutState, delivery_type: DeliveryType, settings: DeliverySettings
) -> CheckoutState:
    if delivery_type not in enabled_options(settings):
        raise DeliverySelectionError("Opção de entrega indisponível.")

    state.delivery_type = delivery_type
    if delivery_type != DeliveryType.NEIGHBORHOOD:
        state.neighborhood_id = None

    state.delivery_fee = pricing.delivery_fee(state.delivery_type, state.neighborhood_id, settings)
    return state


def select_neighborhood(
    state: CheckoutState, neighborhood_id: Optional[str], settings: DeliverySettings
) -> CheckoutState:
    if state.delivery_type != DeliveryType.NEIGHBORHOOD:
        raise DeliverySelectionError("Selecione a entrega por bairro primeiro.")

    neighborhood = settings.neighborhood_rates.find(neighborhood_id)
    # nieznany bairro traktujemy jak brak wyboru
    state.neighborhood_id = neighborhood.id if neighborhood else None
    state.delivery_fee = pricing.delivery_fee(state.delivery_type, state.neighborhood_id, settings)
    return state


def build_delivery_option(state: CheckoutState, settings: DeliverySettings) -> DeliveryOption:
    fee = pricing.delivery_fee(state.delivery_type, state.neighborhood_id, settings)

    if state.delivery_type == DeliveryType.FIXED_RATE:
        return DeliveryOption(
            type=DeliveryType.FIXED_RATE,
            name=f"Entrega Taxa Fixa: {format_currency(fee)}",
            fee=fee,
        )

    if state.delivery_type == DeliveryType.NEIGHBORHOOD:
        neighborhood = settings.neighborhood_rates.find(state.neighborhood_id)
        if neighborhood is None:
            raise DeliverySelectionError("Por favor, selecione um bairro para entrega.")
        return DeliveryOption(
            type=DeliveryType.NEIGHBORHOOD,
            name=f"Entrega {neighborhood.name}: {format_currency(fee)}",
            fee=fee,
            neighborhood_id=neighborhood.id,
            neighborhood_name=neighborhood.name,
        )

    return DeliveryOption(type=DeliveryType.PICKUP, name="Retirada no Local", fee=ZERO)


def order_total(cart: Cart, state: CheckoutState) -> Decimal:
    return pricing.order_total(cart.subtotal, state.delivery_fee)


# =====================================================
# KROKI
# =====================================================
def next_step(state: CheckoutState, cart: Cart) -> CheckoutState:
    if state.step == CheckoutStep.CART_REVIEW:
        if not cart.items:
            raise EmptyCartError()
        state.step = CheckoutStep.DELIVERY_SELECTION

    elif state.step == CheckoutStep.DELIVERY_SELECTION:
        if state.delivery_type is None:
            raise DeliverySelectionError("Por favor, selecione uma opção de entrega.")
        if state.delivery_type == DeliveryType.NEIGHBORHOOD and not state.neighborhood_id:
            raise DeliverySelectionError("Por favor, selecione um bairro para entrega.")
        state.step = CheckoutStep.CUSTOMER_INFO

    return state


def prev_step(state: CheckoutState) -> CheckoutState:
    # cofanie zawsze dozwolone, formularz zostaje
    if state.step == CheckoutStep.CUSTOMER_INFO:
        state.step = CheckoutStep.DELIVERY_SELECTION
    elif state.step == CheckoutStep.DELIVERY_SELECTION:
        state.step = CheckoutStep.CART_REVIEW
    return state


def fresh_state(settings: DeliverySettings) -> CheckoutState:
    fresh = CheckoutState(delivery_type=default_delivery_type(settings))
    fresh.delivery_fee = pricing.delivery_fee(fresh.delivery_type, None, settings)
    return fresh


# =====================================================
# WALIDACJA DANYCH KLIENTA
# =====================================================
def validate_customer(state: CheckoutState) -> Customer:
    """Zwraca Customer albo rzuca CheckoutValidationError z bledami per pole."""
    form = state.form
    errors: Dict[str, str] = {}

    name = form.name.strip()
    if len(name) < MIN_NAME_LENGTH:
        errors["name"] = "O nome deve ter pelo menos 3 caracteres."

    phone = form.phone.strip()
    if not PHONE_PATTERN.match(phone):
        errors["phone"] = "Formato inválido. Use (XX) XXXXX-XXXX"

    if state.delivery_type is None:
        errors["delivery_option"] = "Selecione uma opção de entrega."

    needs_address = state.delivery_type is not None and state.delivery_type != DeliveryType.PICKUP
    if needs_address:
        for field in ("street", "number", "district"):
            if not getattr(form, field).strip():
                errors[field] = "Campo obrigatório."
        if state.delivery_type == DeliveryType.NEIGHBORHOOD and not state.neighborhood_id:
            errors["neighborhood"] = "Por favor, selecione um bairro para entrega."

    if errors:
        raise CheckoutValidationError(errors)

    address = None
    if needs_address:
        address = Address(
            street=form.street.strip(),
            number=form.number.strip(),
            complement=form.complement.strip() or None,
            district=form.district.strip(),
        )

    return Customer(name=name, phone=phone, address=address)


def format_phone(raw: str) -> str:
    """Maska (XX) XXXXX-XXXX z samych cyfr, jak w polu telefonu."""
    digits = re.sub(r"\D", "", raw or "")[:11]
    formatted = ""
    if digits:
        formatted = f"({digits[:2]}"
    if len(digits) > 2:
        formatted += f") {digits[2:7]}"
    if len(digits) > 7:
        formatted += f"-{digits[7:11]}"
    return formatted
