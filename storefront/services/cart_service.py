# storefront/services/cart_service.py
from typing import Iterable, List, Tuple

from storefront.domain import cart as cart_ops
from storefront.domain.entities import Cart, Product, SelectedVariation
from storefront.domain.errors import NotFoundError
from storefront.repos.session_repo import SessionRepo
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_selection(product: Product, requested: Iterable[Tuple[str, str]]) -> List[SelectedVariation]:
    """
    (group_id, option_id) -> snapshot SelectedVariation.
    Sprawdza wymagane grupy i pojedynczy wybor tam gdzie grupa nie pozwala na wiecej.
    """
    selected: List[SelectedVariation] = []
    per_group: dict = {}

    for group_id, option_id in requested:
        group = product.find_group(group_id)
        if group is None:
            raise ValueError(f"Grupo de variação inválido: {group_id}")
        option = group.find_option(option_id)
        if option is None:
            raise ValueError(f"Opção inválida para {group.name}: {option_id}")

        per_group[group.id] = per_group.get(group.id, 0) + 1
        if per_group[group.id] > 1 and not group.multiple_selection:
            raise ValueError(f"Selecione apenas uma opção para {group.name}")

        selected.append(
            SelectedVariation(
                group_id=group.id,
                option_id=option.id,
                group_name=group.name,
                option_name=option.name,
                price_modifier=option.price_modifier,
            )
        )

    missing = [g.name for g in product.variation_groups if g.required and g.id not in per_group]
    if missing:
        raise ValueError(f"Por favor, selecione todas as opções obrigatórias: {', '.join(missing)}")

    return selected


class CartService:
    """
    commands (add, update, remove, clear) modyfikuja koszyk w sesji
    query (get) tylko odczyt
    Kazda komenda: load sesji -> operacja domenowa -> save (przedluza TTL).
    """

    def __init__(self, sessions: SessionRepo, catalog: CatalogService):
        self.sessions = sessions
        self.catalog = catalog

    #query - odczyt
    def get_cart(self, session_id: str) -> Cart:
        return self.sessions.load(session_id).cart

    #commands
    def add_product(
        self,
        session_id: str,
        product_id: str,
        quantity: int,
        selections: Iterable[Tuple[str, str]] = (),
    ) -> Cart:
        if quantity < 1:
            raise ValueError("Quantidade deve ser pelo menos 1")

        product = self.catalog.get_product(product_id)
        if product is None:
            raise NotFoundError("Produto não encontrado")

        variations = resolve_selection(product, selections)

        session = self.sessions.load(session_id)

        # magazyn sprawdzamy tutaj, silnik koszyka tego nie robi
        if product.stock_control:
            in_cart = session.cart.quantity_of(product.id)
            available = product.stock_quantity - in_cart
            if quantity > available:
                raise ValueError(f"Estoque insuficiente. Disponível: {max(available, 0)}")

        item = cart_ops.add_item(session.cart, product, quantity, variations)
        self.sessions.save(session_id, session)

        logger.info(
            f"Produkt {product.id} dodany do koszyka sesji {session_id} "
            f"(linia {item.id}, ilosc {item.quantity})"
        )
        return session.cart

    def update_quantity(self, session_id: str, item_id: str, quantity: int) -> Cart:
        session = self.sessions.load(session_id)
        if session.cart.find_item(item_id) is None:
            return session.cart

        cart_ops.update_quantity(session.cart, item_id, quantity)
        self.sessions.save(session_id, session)
        return session.cart

    def remove_item(self, session_id: str, item_id: str) -> Cart:
        session = self.sessions.load(session_id)
        # brak linii -> nic sie nie dzieje
        if not cart_ops.remove_item(session.cart, item_id):
            return session.cart

        self.sessions.save(session_id, session)
        logger.info(f"Usunieto linie {item_id} z koszyka sesji {session_id}")
        return session.cart

    def clear_cart(self, session_id: str) -> Cart:
        session = self.sessions.load(session_id)
        cart_ops.clear_cart(session.cart)
        self.sessions.save(session_id, session)
        return session.cart
