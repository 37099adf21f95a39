# storefront/data/mappers.py
"""
Jedyne miejsce tlumaczenia wierszy bazy (snake_case kolumny, jsonb z kluczami camelCase)
na encje domenowe i z powrotem. Serwisy i domena nie widza modeli SQLAlchemy.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from storefront.data.models import (
    CategoryModel,
    OrderModel,
    ProductImageModel,
    ProductModel,
    StoreSettingsModel,
    VariationGroupModel,
    VariationOptionModel,
)
from storefront.domain.entities import (
    Address,
    CartItem,
    Category,
    ContactInfo,
    Customer,
    DeliveryOption,
    DeliverySettings,
    FixedRateSettings,
    Neighborhood,
    NeighborhoodRates,
    Order,
    PickupSettings,
    Product,
    ProductImage,
    SocialLink,
    StoreSettings,
    VariationGroup,
    VariationOption,
)

# pole encji -> kolumna, tylko tam gdzie nazwy sie roznia
_CATEGORY_COLUMNS = {"position": "order_position"}
_IMAGE_COLUMNS = {"position": "order_position"}
_GROUP_COLUMNS = {"position": "order_position"}
_OPTION_COLUMNS = {"stock": "stock_quantity", "position": "order_position"}
_SETTINGS_COLUMNS = {"description": "store_description"}


def to_columns(data: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    return {mapping.get(k, k): v for k, v in data.items()}


def category_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return to_columns(data, _CATEGORY_COLUMNS)


def image_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return to_columns(data, _IMAGE_COLUMNS)


def group_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return to_columns(data, _GROUP_COLUMNS)


def option_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return to_columns(data, _OPTION_COLUMNS)


# =====================================================
# KATALOG
# =====================================================
def category_from_row(row: CategoryModel) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        description=row.description or "",
        active=True if row.active is None else row.active,
        position=row.order_position or 0,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def image_from_row(row: ProductImageModel) -> ProductImage:
    return ProductImage(
        id=row.id,
        url=row.url,
        is_main=bool(row.is_main),
        position=row.order_position or 0,
    )


def option_from_row(row: VariationOptionModel) -> VariationOption:
    return VariationOption(
        id=row.id,
        name=row.name,
        price_modifier=Decimal(str(row.price_modifier or 0)),
        stock=row.stock_quantity,
    )


def group_from_row(row: VariationGroupModel) -> VariationGroup:
    return VariationGroup(
        id=row.id,
        name=row.name,
        required=bool(row.required),
        multiple_selection=bool(row.multiple_selection),
        options=[option_from_row(o) for o in row.options],
    )


def product_from_row(row: ProductModel) -> Product:
    images = sorted((image_from_row(i) for i in row.images), key=lambda i: i.position)
    return Product(
        id=row.id,
        name=row.name,
        description=row.description or "",
        price=Decimal(str(row.price)),
        category_id=row.category_id,
        category_name=row.category.name if row.category else "",
        images=images,
        variation_groups=[group_from_row(g) for g in row.variation_groups],
        stock_control=bool(row.stock_control),
        stock_quantity=row.stock_quantity or 0,
        auto_stock_reduction=bool(row.auto_stock_reduction),
        active=True if row.active is None else row.active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# =====================================================
# USTAWIENIA
# =====================================================
def _decimal(value, default: str = "0") -> Decimal:
    return Decimal(str(value if value is not None else default))


def delivery_from_json(data: Optional[Dict[str, Any]]) -> DeliverySettings:
    if not data:
        return DeliverySettings()

    defaults = DeliverySettings()
    pickup = data.get("pickup") or {}
    fixed = data.get("fixedRate") or {}
    rates = data.get("neighborhoodRates") or {}

    return DeliverySettings(
        pickup=PickupSettings(
            enabled=bool(pickup.get("enabled", False)),
            instructions=pickup.get("instructions") or defaults.pickup.instructions,
        ),
        fixed_rate=FixedRateSettings(
            enabled=bool(fixed.get("enabled", False)),
            fee=_decimal(fixed.get("fee")),
            description=fixed.get("description") or defaults.fixed_rate.description,
        ),
        neighborhood_rates=NeighborhoodRates(
            enabled=bool(rates.get("enabled", False)),
            neighborhoods=[
                Neighborhood(id=n["id"], name=n["name"], fee=_decimal(n.get("fee")))
                for n in rates.get("neighborhoods") or []
            ],
        ),
        min_order_value=_decimal(data.get("minOrderValue")),
    )


def delivery_to_json(delivery: DeliverySettings) -> Dict[str, Any]:
    return {
        "pickup": {
            "enabled": delivery.pickup.enabled,
            "instructions": delivery.pickup.instructions,
        },
        "fixedRate": {
            "enabled": delivery.fixed_rate.enabled,
            "fee": float(delivery.fixed_rate.fee),
            "description": delivery.fixed_rate.description,
        },
        "neighborhoodRates": {
            "enabled": delivery.neighborhood_rates.enabled,
            "neighborhoods": [
                {"id": n.id, "name": n.name, "fee": float(n.fee)}
                for n in delivery.neighborhood_rates.neighborhoods
            ],
        },
        "minOrderValue": float(delivery.min_order_value),
    }


def settings_from_row(row: StoreSettingsModel) -> StoreSettings:
    defaults = StoreSettings()
    return StoreSettings(
        id=row.id,
        store_name=row.store_name or defaults.store_name,
        description=row.store_description if row.store_description is not None else defaults.description,
        logo_url=row.logo_url,
        banner_url=row.banner_url,
        primary_color=row.primary_color or defaults.primary_color,
        secondary_color=row.secondary_color or defaults.secondary_color,
        whatsapp_number=row.whatsapp_number,
        contact_info=ContactInfo(**(row.contact_info or {})),
        social_links=[SocialLink(**link) for link in row.social_links or []],
        delivery=delivery_from_json(row.delivery_settings),
        updated_at=row.updated_at,
    )


def settings_values(settings: StoreSettings) -> Dict[str, Any]:
    return {
        "store_name": settings.store_name,
        "store_description": settings.description,
        "logo_url": settings.logo_url,
        "banner_url": settings.banner_url,
        "primary_color": settings.primary_color,
        "secondary_color": settings.secondary_color,
        "whatsapp_number": settings.whatsapp_number,
        "contact_info": settings.contact_info.model_dump(),
        "social_links": [link.model_dump() for link in settings.social_links],
        "delivery_settings": delivery_to_json(settings.delivery),
    }


# =====================================================
# ZAMOWIENIA
# =====================================================
def order_to_row(order: Order) -> OrderModel:
    address = order.customer.address
    return OrderModel(
        order_number=order.order_number,
        customer_name=order.customer.name,
        customer_phone=order.customer.phone,
        customer_address=address.model_dump() if address else None,
        items=[item.model_dump(mode="json") for item in order.items],
        subtotal=order.subtotal,
        delivery_option=order.delivery_option.model_dump(mode="json"),
        total=order.total,
        notes=order.notes,
        status=order.status.value,
        whatsapp_sent=order.whatsapp_sent,
        created_at=order.created_at,
    )


def order_from_row(row: OrderModel) -> Order:
    address = Address(**row.customer_address) if row.customer_address else None
    return Order(
        id=row.id,
        order_number=row.order_number,
        customer=Customer(name=row.customer_name, phone=row.customer_phone, address=address),
        items=[CartItem.model_validate(item) for item in row.items or []],
        subtotal=Decimal(str(row.subtotal)),
        delivery_option=DeliveryOption.model_validate(row.delivery_option),
        total=Decimal(str(row.total)),
        notes=row.notes,
        status=row.status,
        created_at=row.created_at,
        whatsapp_sent=bool(row.whatsapp_sent),
    )
