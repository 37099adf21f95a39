# storefront/domain/order_message.py
import random
import time
from decimal import Decimal
from typing import Optional

from storefront.domain.entities import CartItem, Order


def format_currency(value: Decimal) -> str:
    """Decimal('1234.5') -> 'R$ 1.234,50'"""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def generate_order_number(
    prefix: str = "",
    now_ms: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> str:
    # 6 ostatnich cyfr czasu w ms + 3 cyfry losowe
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    rng = rng or random
    return f"{prefix}{str(now_ms)[-6:]}{rng.randint(0, 999):03d}"


def _format_line(item: CartItem) -> str:
    variations = ""
    if item.selected_variations:
        joined = ", ".join(f"{v.group_name}: {v.option_name}" for v in item.selected_variations)
        variations = f" ({joined})"
    unit = item.total_price / item.quantity
    return (
        f"- {item.quantity}x {item.product_name}{variations}"
        f" - {format_currency(unit)} cada = {format_currency(item.total_price)}"
    )


def format_order_message(order: Order, store_name: str) -> str:
    customer = order.customer
    lines = [
        f"*Pedido Loja {store_name}!*",
        f"*Pedido:* #{order.order_number}",
        "",
        f"*Cliente:* {customer.name}",
        f"*Telefone:* {customer.phone}",
    ]
    if customer.address:
        lines.append(f"*Endereço:* {customer.address.one_line()}")

    lines += ["", "*Itens:*"]
    lines += [_format_line(item) for item in order.items]

    lines += [
        "",
        f"*Subtotal:* {format_currency(order.subtotal)}",
        f"*Entrega:* {format_currency(order.delivery_option.fee)}",
        f"*Total:* {format_currency(order.total)}",
    ]
    if order.notes:
        lines += ["", f"*Obs:* {order.notes}"]

    return "\n".join(lines)
