from __future__ import annotations

import random
from datetime import datetime, timezone
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest

from storefront.domain.entities import (
    Address,
    CartItem,
    Customer,
    DeliveryOption,
    DeliveryType,
    Order,
    SelectedVariation,
)
from storefront.domain.errors import HandoffConfigError
from storefront.domain.order_message import format_currency, format_order_message, generate_order_number
from storefront.services.handoff_service import WhatsAppHandoff, normalize_number


def _order(notes: str | None = None, address: Address | None = None) -> Order:
    item = CartItem(
        id="line-1",
        product_id="p-1",
        product_name="Camiseta",
        quantity=3,
        base_price=Decimal("10.00"),
        selected_variations=[
            SelectedVariation(
                group_id="g", option_id="o", group_name="Tamanho", option_name="G", price_modifier=Decimal("2.00")
            )
        ],
        total_price=Decimal("36.00"),
    )
    return Order(
        order_number="123456789",
        customer=Customer(name="Maria Silva", phone="(11) 98765-4321", address=address),
        items=[item],
        subtotal=Decimal("36.00"),
        delivery_option=DeliveryOption(type=DeliveryType.FIXED_RATE, name="Entrega Taxa Fixa: R$ 5,00", fee=Decimal("5.00")),
        total=Decimal("41.00"),
        notes=notes,
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("0"), "R$ 0,00"),
        (Decimal("5"), "R$ 5,00"),
        (Decimal("1234.56"), "R$ 1.234,56"),
        (Decimal("1000000.1"), "R$ 1.000.000,10"),
    ],
)
def test_format_currency_brl(value: Decimal, expected: str) -> None:
    assert format_currency(value) == expected


def test_order_number_uses_time_tail_and_random_suffix() -> None:
    number = generate_order_number("PED", now_ms=1714567890123, rng=random.Random(7))

    assert number.startswith("PED890123")
    assert len(number) == len("PED") + 9
    assert number[-3:].isdigit()


def test_message_layout() -> None:
    address = Address(street="Rua A", number="10", district="Centro")
    message = format_order_message(_order(address=address), "Loja Teste")

    assert message.split("\n") == [
        "*Pedido Loja Loja Teste!*",
        "*Pedido:* #123456789",
        "",
        "*Cliente:* Maria Silva",
        "*Telefone:* (11) 98765-4321",
        "*Endereço:* Rua A, 10 - Centro",
        "",
        "*Itens:*",
        "- 3x Camiseta (Tamanho: G) - R$ 12,00 cada = R$ 36,00",
        "",
        "*Subtotal:* R$ 36,00",
        "*Entrega:* R$ 5,00",
        "*Total:* R$ 41,00",
    ]


def test_message_notes_and_no_address() -> None:
    message = format_order_message(_order(notes="Sem cebola"), "Loja")

    assert "*Endereço:*" not in message
    assert message.endswith("*Total:* R$ 41,00\n\n*Obs:* Sem cebola")


def test_handoff_url_encodes_message() -> None:
    handoff = WhatsAppHandoff(base_url="https://wa.me/")
    message = format_order_message(_order(notes="50% & mais"), "Loja")

    url = handoff.build_url("+55 (11) 98765-4321", message)
    parsed = urlparse(url)

    assert parsed.netloc == "wa.me"
    assert parsed.path == "/5511987654321"
    assert " " not in url and "\n" not in url
    assert parse_qs(parsed.query)["text"] == [message]


@pytest.mark.parametrize("number", [None, "", "12345", "(11) 9876"])
def test_handoff_requires_configured_number(number: str | None) -> None:
    with pytest.raises(HandoffConfigError):
        WhatsAppHandoff().ensure_configured(number)


def test_normalize_number_strips_formatting() -> None:
    assert normalize_number("+55 (11) 98765-4321") == "5511987654321"
    assert normalize_number(None) == ""
