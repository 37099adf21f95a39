# storefront/domain/entities.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

ZERO = Decimal("0.00")


# =====================================================
# KATALOG
# =====================================================
class Category(BaseModel):
    id: str
    name: str
    description: str = ""
    active: bool = True
    position: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductImage(BaseModel):
    id: str
    url: str
    is_main: bool = False
    position: int = 0


class VariationOption(BaseModel):
    id: str
    name: str
    price_modifier: Decimal = ZERO
    stock: Optional[int] = None


class VariationGroup(BaseModel):
    id: str
    name: str
    required: bool = False
    multiple_selection: bool = False
    options: List[VariationOption] = Field(default_factory=list)

    def find_option(self, option_id: str) -> Optional[VariationOption]:
        return next((o for o in self.options if o.id == option_id), None)


class Product(BaseModel):
    id: str
    name: str
    description: str = ""
    price: Decimal
    category_id: Optional[str] = None
    category_name: str = ""
    images: List[ProductImage] = Field(default_factory=list)
    variation_groups: List[VariationGroup] = Field(default_factory=list)
    stock_control: bool = False
    stock_quantity: int = 0
    auto_stock_reduction: bool = False
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def main_image(self) -> Optional[ProductImage]:
        # obrazek oznaczony jako glowny, a jak go nie ma to pierwszy
        main = next((img for img in self.images if img.is_main), None)
        return main or (self.images[0] if self.images else None)

    def find_group(self, group_id: str) -> Optional[VariationGroup]:
        return next((g for g in self.variation_groups if g.id == group_id), None)


# =====================================================
# KOSZYK
# =====================================================
class SelectedVariation(BaseModel):
    """Snapshot wybranej opcji - niezalezny od pozniejszych zmian w katalogu."""

    group_id: str
    option_id: str
    group_name: str
    option_name: str
    price_modifier: Decimal = ZERO

    def key(self) -> Tuple[str, str]:
        return (self.group_id, self.option_id)


class CartItem(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    base_price: Decimal
    selected_variations: List[SelectedVariation] = Field(default_factory=list)
    total_price: Decimal = ZERO
    image_url: Optional[str] = None


class Cart(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    subtotal: Decimal = ZERO

    def find_item(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def quantity_of(self, product_id: str) -> int:
        return sum(i.quantity for i in self.items if i.product_id == product_id)


# =====================================================
# USTAWIENIA SKLEPU
# =====================================================
class Neighborhood(BaseModel):
    id: str
    name: str
    fee: Decimal = ZERO


class PickupSettings(BaseModel):
    enabled: bool = False
    instructions: str = "Retire seu pedido em nosso endereço."


class FixedRateSettings(BaseModel):
    enabled: bool = False
    fee: Decimal = ZERO
    description: str = "Taxa de entrega única para toda a cidade."


class NeighborhoodRates(BaseModel):
    enabled: bool = False
    neighborhoods: List[Neighborhood] = Field(default_factory=list)

    def find(self, neighborhood_id: Optional[str]) -> Optional[Neighborhood]:
        if not neighborhood_id:
            return None
        return next((n for n in self.neighborhoods if n.id == neighborhood_id), None)


class DeliverySettings(BaseModel):
    pickup: PickupSettings = Field(default_factory=PickupSettings)
    fixed_rate: FixedRateSettings = Field(default_factory=FixedRateSettings)
    neighborhood_rates: NeighborhoodRates = Field(default_factory=NeighborhoodRates)
    min_order_value: Decimal = ZERO


class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = ""


class SocialLink(BaseModel):
    id: str
    name: str
    url: str


class StoreSettings(BaseModel):
    id: Optional[str] = None
    store_name: str = "Nome da Loja Padrão"
    description: Optional[str] = "Descrição padrão da loja."
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    primary_color: str = "#3B82F6"
    secondary_color: str = "#10B981"
    whatsapp_number: Optional[str] = None
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: List[SocialLink] = Field(default_factory=list)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    updated_at: Optional[datetime] = None


# =====================================================
# ZAMOWIENIE
# =====================================================
class DeliveryType(str, Enum):
    PICKUP = "pickup"
    FIXED_RATE = "fixedRate"
    NEIGHBORHOOD = "neighborhood"


class DeliveryOption(BaseModel):
    type: DeliveryType
    name: str
    fee: Decimal = ZERO
    neighborhood_id: Optional[str] = None
    neighborhood_name: Optional[str] = None


class Address(BaseModel):
    street: str
    number: str
    complement: Optional[str] = None
    district: str

    def one_line(self) -> str:
        complement = f", {self.complement}" if self.complement else ""
        return f"{self.street}, {self.number}{complement} - {self.district}"


class Customer(BaseModel):
    name: str
    phone: str
    address: Optional[Address] = None


class OrderStatus(str, Enum):
    NEW = "new"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(BaseModel):
    id: Optional[int] = None
    order_number: str
    customer: Customer
    items: List[CartItem]
    subtotal: Decimal
    delivery_option: DeliveryOption
    total: Decimal
    notes: Optional[str] = None
    status: OrderStatus = OrderStatus.NEW
    created_at: datetime
    whatsapp_sent: bool = False
