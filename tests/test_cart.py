from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import make_product
from storefront.domain import cart as cart_ops
from storefront.domain import pricing
from storefront.domain.entities import Cart, ProductImage, SelectedVariation


def _variation(option_id: str = "o-g", modifier: str = "2.00", group_id: str = "g-size") -> SelectedVariation:
    return SelectedVariation(
        group_id=group_id,
        option_id=option_id,
        group_name="Tamanho",
        option_name=option_id,
        price_modifier=Decimal(modifier),
    )


def _assert_consistent(cart: Cart) -> None:
    for item in cart.items:
        unit = item.base_price + sum((v.price_modifier for v in item.selected_variations), Decimal("0"))
        assert item.total_price == unit * item.quantity
    assert cart.subtotal == sum((i.total_price for i in cart.items), Decimal("0"))


def test_add_item_computes_line_total_from_modifiers() -> None:
    cart = Cart()
    item = cart_ops.add_item(cart, make_product(price="10.00"), 3, [_variation()])

    assert item.total_price == Decimal("36.00")
    assert cart.subtotal == Decimal("36.00")
    _assert_consistent(cart)


def test_same_selection_merges_into_one_line() -> None:
    cart = Cart()
    product = make_product()

    cart_ops.add_item(cart, product, 1, [_variation()])
    cart_ops.add_item(cart, product, 2, [_variation()])

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3
    _assert_consistent(cart)


def test_selection_order_does_not_matter_for_merge() -> None:
    cart = Cart()
    product = make_product()
    color = _variation("o-red", "1.00", group_id="g-color")

    cart_ops.add_item(cart, product, 1, [_variation(), color])
    cart_ops.add_item(cart, product, 1, [color, _variation()])

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2


def test_different_selection_creates_separate_lines() -> None:
    cart = Cart()
    product = make_product()

    cart_ops.add_item(cart, product, 1, [_variation("o-g", "2.00")])
    cart_ops.add_item(cart, product, 1, [_variation("o-p", "0.00")])
    cart_ops.add_item(cart, product, 1, [])

    assert len(cart.items) == 3
    assert len({i.id for i in cart.items}) == 3
    _assert_consistent(cart)


def test_merge_keeps_price_from_first_add() -> None:
    cart = Cart()
    cart_ops.add_item(cart, make_product(price="10.00"), 1, [])

    # cena w katalogu zmienila sie miedzy dodaniami
    cart_ops.add_item(cart, make_product(price="15.00"), 1, [])

    assert len(cart.items) == 1
    assert cart.items[0].base_price == Decimal("10.00")
    assert cart.items[0].total_price == Decimal("20.00")


def test_add_item_rejects_non_positive_quantity() -> None:
    with pytest.raises(ValueError):
        cart_ops.add_item(Cart(), make_product(), 0, [])


def test_add_item_uses_main_image() -> None:
    product = make_product(
        images=[
            ProductImage(id="i1", url="https://img/1.png"),
            ProductImage(id="i2", url="https://img/2.png", is_main=True),
        ]
    )
    item = cart_ops.add_item(Cart(), product, 1, [])
    assert item.image_url == "https://img/2.png"


@pytest.mark.parametrize("quantity", [0, -5])
def test_update_quantity_below_one_removes_line(quantity: int) -> None:
    cart = Cart()
    item = cart_ops.add_item(cart, make_product(), 2, [])

    result = cart_ops.update_quantity(cart, item.id, quantity)

    assert result is None
    assert cart.items == []
    assert cart.subtotal == Decimal("0.00")


def test_update_quantity_reprices_from_stored_snapshot() -> None:
    cart = Cart()
    item = cart_ops.add_item(cart, make_product(price="7.50"), 1, [_variation("o-gg", "3.50")])

    cart_ops.update_quantity(cart, item.id, 4)

    assert item.quantity == 4
    assert item.total_price == Decimal("44.00")
    _assert_consistent(cart)


def test_remove_item_is_idempotent() -> None:
    cart = Cart()
    keep = cart_ops.add_item(cart, make_product("p-1"), 1, [])
    drop = cart_ops.add_item(cart, make_product("p-2", price="4.00"), 1, [])

    assert cart_ops.remove_item(cart, drop.id) is True
    assert cart_ops.remove_item(cart, drop.id) is False
    assert [i.id for i in cart.items] == [keep.id]
    assert cart.subtotal == Decimal("10.00")


def test_clear_cart_resets_subtotal() -> None:
    cart = Cart()
    cart_ops.add_item(cart, make_product(), 2, [])

    cart_ops.clear_cart(cart)

    assert cart.items == []
    assert cart.subtotal == Decimal("0.00")


def test_money_rounds_half_up() -> None:
    assert pricing.money("2.345") == Decimal("2.35")
    assert pricing.money(Decimal("0.005")) == Decimal("0.01")
