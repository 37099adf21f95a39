# storefront/domain/cart.py
import uuid
from typing import List, Optional, Sequence

from storefront.domain.entities import Cart, CartItem, Product, SelectedVariation
from storefront.domain import pricing


def same_selection(a: Sequence[SelectedVariation], b: Sequence[SelectedVariation]) -> bool:
    """Ten sam zestaw (group_id, option_id), kolejnosc bez znaczenia."""
    if len(a) != len(b):
        return False
    return {v.key() for v in a} == {v.key() for v in b}


def find_matching_line(
    cart: Cart, product_id: str, variations: Sequence[SelectedVariation]
) -> Optional[CartItem]:
    for item in cart.items:
        if item.product_id == product_id and same_selection(item.selected_variations, variations):
            return item
    return None


def add_item(
    cart: Cart,
    product: Product,
    quantity: int,
    selected_variations: List[SelectedVariation],
) -> CartItem:
    """
    Dodaje produkt do koszyka.
    Ta sama konfiguracja wariantow -> zwiekszamy ilosc istniejacej linii,
    cena bazowa zostaje z pierwszego dodania.
    Stanu magazynowego tu nie sprawdzamy, robi to wywolujacy.
    """
    if quantity < 1:
        raise ValueError("Quantidade deve ser pelo menos 1")

    existing = find_matching_line(cart, product.id, selected_variations)

    if existing:
        existing.quantity += quantity
        pricing.reprice(existing)
        pricing.recalculate(cart)
        return existing

    main_image = product.main_image()
    item = CartItem(
        id=str(uuid.uuid4()),
        product_id=product.id,
        product_name=product.name,
        quantity=quantity,
        base_price=pricing.money(product.price),
        selected_variations=list(selected_variations),
        image_url=main_image.url if main_image else None,
    )
    pricing.reprice(item)
    cart.items.append(item)
    pricing.recalculate(cart)
    return item


def remove_item(cart: Cart, item_id: str) -> bool:
    before = len(cart.items)
    cart.items = [i for i in cart.items if i.id != item_id]
    pricing.recalculate(cart)
    return len(cart.items) != before


def update_quantity(cart: Cart, item_id: str, quantity: int) -> Optional[CartItem]:
    # ilosc < 1 dziala jak usuniecie
    if quantity < 1:
        remove_item(cart, item_id)
        return None

    item = cart.find_item(item_id)
    if item is None:
        return None

    item.quantity = quantity
    pricing.reprice(item)
    pricing.recalculate(cart)
    return item


def clear_cart(cart: Cart) -> Cart:
    cart.items = []
    cart.subtotal = pricing.ZERO
    return cart
