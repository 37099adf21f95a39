from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import make_product, make_settings
from storefront.domain import cart as cart_ops
from storefront.domain import checkout
from storefront.domain.checkout import CheckoutState, CheckoutStep, CustomerForm
from storefront.domain.entities import Cart, DeliveryType
from storefront.domain.errors import CheckoutValidationError, DeliverySelectionError, EmptyCartError

HOODS = [("n-centro", "Centro", "4.00"), ("n-vila", "Vila Nova", "7.50")]


def _valid_form(**overrides) -> CustomerForm:
    data = dict(
        name="Maria Silva",
        phone="(11) 98765-4321",
        street="Rua das Flores",
        number="123",
        district="Centro",
    )
    data.update(overrides)
    return CustomerForm(**data)


def _cart_with_item() -> Cart:
    cart = Cart()
    cart_ops.add_item(cart, make_product(), 1, [])
    return cart


def test_default_delivery_is_first_enabled_option() -> None:
    assert checkout.default_delivery_type(make_settings().delivery) == DeliveryType.PICKUP
    assert checkout.default_delivery_type(make_settings(pickup=False).delivery) == DeliveryType.FIXED_RATE
    assert checkout.default_delivery_type(
        make_settings(pickup=False, fixed_fee=None, neighborhoods=HOODS).delivery
    ) == DeliveryType.NEIGHBORHOOD
    assert checkout.default_delivery_type(make_settings(pickup=False, fixed_fee=None).delivery) is None


def test_neighborhood_option_requires_at_least_one_neighborhood() -> None:
    settings = make_settings(neighborhoods=[])
    settings.delivery.neighborhood_rates.enabled = True

    assert DeliveryType.NEIGHBORHOOD not in checkout.enabled_options(settings.delivery)


def test_selecting_disabled_option_is_rejected() -> None:
    settings = make_settings(fixed_fee=None)
    with pytest.raises(DeliverySelectionError):
        checkout.select_delivery(CheckoutState(), DeliveryType.FIXED_RATE, settings.delivery)


def test_pickup_fee_is_zero_even_after_neighborhood_choice() -> None:
    settings = make_settings(neighborhoods=HOODS)
    state = CheckoutState()

    checkout.select_delivery(state, DeliveryType.NEIGHBORHOOD, settings.delivery)
    checkout.select_neighborhood(state, "n-vila", settings.delivery)
    assert state.delivery_fee == Decimal("7.50")

    checkout.select_delivery(state, DeliveryType.PICKUP, settings.delivery)
    assert state.delivery_fee == Decimal("0.00")
    assert state.neighborhood_id is None


def test_leaving_neighborhood_clears_selection() -> None:
    settings = make_settings(neighborhoods=HOODS)
    state = CheckoutState()
    checkout.select_delivery(state, DeliveryType.NEIGHBORHOOD, settings.delivery)
    checkout.select_neighborhood(state, "n-centro", settings.delivery)

    checkout.select_delivery(state, DeliveryType.FIXED_RATE, settings.delivery)

    assert state.neighborhood_id is None
    assert state.delivery_fee == Decimal("5.00")


def test_neighborhood_fee_is_zero_until_chosen() -> None:
    settings = make_settings(neighborhoods=HOODS)
    state = CheckoutState()
    checkout.select_delivery(state, DeliveryType.NEIGHBORHOOD, settings.delivery)
    assert state.delivery_fee == Decimal("0.00")

    checkout.select_neighborhood(state, "unknown", settings.delivery)
    assert state.neighborhood_id is None
    assert state.delivery_fee == Decimal("0.00")


def test_select_neighborhood_needs_neighborhood_delivery() -> None:
    settings = make_settings(neighborhoods=HOODS)
    state = CheckoutState(delivery_type=DeliveryType.PICKUP)
    with pytest.raises(DeliverySelectionError):
        checkout.select_neighborhood(state, "n-centro", settings.delivery)


def test_empty_cart_blocks_first_step() -> None:
    state = CheckoutState()
    with pytest.raises(EmptyCartError):
        checkout.next_step(state, Cart())
    assert state.step == CheckoutStep.CART_REVIEW


def test_delivery_step_needs_option_and_neighborhood() -> None:
    settings = make_settings(neighborhoods=HOODS)
    cart = _cart_with_item()
    state = CheckoutState()
    checkout.next_step(state, cart)
    assert state.step == CheckoutStep.DELIVERY_SELECTION

    with pytest.raises(DeliverySelectionError):
        checkout.next_step(state, cart)

    checkout.select_delivery(state, DeliveryType.NEIGHBORHOOD, settings.delivery)
    with pytest.raises(DeliverySelectionError):
        checkout.next_step(state, cart)

    checkout.select_neighborhood(state, "n-centro", settings.delivery)
    checkout.next_step(state, cart)
    assert state.step == CheckoutStep.CUSTOMER_INFO


def test_going_back_keeps_form_values() -> None:
    state = CheckoutState(step=CheckoutStep.CUSTOMER_INFO, form=_valid_form())

    checkout.prev_step(state)
    checkout.prev_step(state)
    checkout.prev_step(state)

    assert state.step == CheckoutStep.CART_REVIEW
    assert state.form.name == "Maria Silva"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": "Jo"}, "name"),
        ({"phone": "123"}, "phone"),
        ({"street": ""}, "street"),
        ({"number": "  "}, "number"),
        ({"district": ""}, "district"),
    ],
)
def test_validation_reports_field_errors(overrides: dict, field: str) -> None:
    state = CheckoutState(delivery_type=DeliveryType.FIXED_RATE, form=_valid_form(**overrides))

    with pytest.raises(CheckoutValidationError) as exc:
        checkout.validate_customer(state)

    assert field in exc.value.errors


def test_pickup_does_not_require_address() -> None:
    state = CheckoutState(
        delivery_type=DeliveryType.PICKUP,
        form=_valid_form(street="", number="", district=""),
    )
    customer = checkout.validate_customer(state)
    assert customer.address is None


def test_neighborhood_delivery_requires_selected_neighborhood() -> None:
    state = CheckoutState(delivery_type=DeliveryType.NEIGHBORHOOD, form=_valid_form())
    with pytest.raises(CheckoutValidationError) as exc:
        checkout.validate_customer(state)
    assert "neighborhood" in exc.value.errors


def test_missing_delivery_option_is_a_field_error() -> None:
    state = CheckoutState(form=_valid_form())
    with pytest.raises(CheckoutValidationError) as exc:
        checkout.validate_customer(state)
    assert "delivery_option" in exc.value.errors


def test_valid_customer_builds_address() -> None:
    state = CheckoutState(
        delivery_type=DeliveryType.FIXED_RATE,
        form=_valid_form(complement="Apto 12"),
    )
    customer = checkout.validate_customer(state)
    assert customer.address.one_line() == "Rua das Flores, 123, Apto 12 - Centro"


def test_delivery_option_labels() -> None:
    settings = make_settings(neighborhoods=HOODS)

    pickup = checkout.build_delivery_option(CheckoutState(delivery_type=DeliveryType.PICKUP), settings.delivery)
    fixed = checkout.build_delivery_option(
        CheckoutState(delivery_type=DeliveryType.FIXED_RATE), settings.delivery
    )
    hood = checkout.build_delivery_option(
        CheckoutState(delivery_type=DeliveryType.NEIGHBORHOOD, neighborhood_id="n-vila"), settings.delivery
    )

    assert pickup.name == "Retirada no Local"
    assert fixed.name == "Entrega Taxa Fixa: R$ 5,00"
    assert hood.name == "Entrega Vila Nova: R$ 7,50"
    assert hood.neighborhood_name == "Vila Nova"


def test_order_total_follows_fee_changes() -> None:
    settings = make_settings(neighborhoods=HOODS)
    cart = _cart_with_item()
    state = checkout.fresh_state(settings.delivery)
    assert checkout.order_total(cart, state) == Decimal("10.00")

    checkout.select_delivery(state, DeliveryType.FIXED_RATE, settings.delivery)
    assert checkout.order_total(cart, state) == Decimal("15.00")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("11987654321", "(11) 98765-4321"),
        ("(11) 9876", "(11) 9876"),
        ("1", "(1"),
        ("", ""),
    ],
)
def test_format_phone_mask(raw: str, expected: str) -> None:
    assert checkout.format_phone(raw) == expected
