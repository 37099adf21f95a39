# storefront/domain/pricing.py
"""Arytmetyka cen: linie koszyka, subtotal, oplata za dostawe, total zamowienia."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from storefront.domain.entities import (
    ZERO,
    Cart,
    CartItem,
    DeliverySettings,
    DeliveryType,
    SelectedVariation,
)

CENTS = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def unit_price(base_price: Decimal, variations: Iterable[SelectedVariation]) -> Decimal:
    return money(base_price + sum((v.price_modifier for v in variations), ZERO))


def line_total(base_price: Decimal, variations: Iterable[SelectedVariation], quantity: int) -> Decimal:
    return money(unit_price(base_price, variations) * quantity)


def reprice(item: CartItem) -> CartItem:
    # zawsze z ceny zapisanej w linii, nigdy z aktualnego katalogu
    item.total_price = line_total(item.base_price, item.selected_variations, item.quantity)
    return item


def cart_subtotal(items: Iterable[CartItem]) -> Decimal:
    return money(sum((i.total_price for i in items), ZERO))


def recalculate(cart: Cart) -> Cart:
    cart.subtotal = cart_subtotal(cart.items)
    return cart


def delivery_fee(
    delivery_type: Optional[DeliveryType],
    neighborhood_id: Optional[str],
    settings: DeliverySettings,
) -> Decimal:
    if delivery_type == DeliveryType.FIXED_RATE and settings.fixed_rate.enabled:
        return money(settings.fixed_rate.fee)

    if delivery_type == DeliveryType.NEIGHBORHOOD:
        neighborhood = settings.neighborhood_rates.find(neighborhood_id)
        if neighborhood:
            return money(neighborhood.fee)

    # pickup, brak wyboru albo bairro jeszcze nie wybrany
    return ZERO


def order_total(subtotal: Decimal, fee: Decimal) -> Decimal:
    return money(subtotal + fee)
