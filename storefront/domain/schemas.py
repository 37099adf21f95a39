# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.checkout import CheckoutStep, CustomerForm
from storefront.domain.entities import (
    Cart,
    ContactInfo,
    DeliveryType,
    Order,
    OrderStatus,
    SocialLink,
)


# =====================================================
# KOSZYK
# =====================================================
class SelectionIn(BaseModel):
    group_id: str
    option_id: str


class AddItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")
    selections: List[SelectionIn] = Field(default_factory=list)


class UpdateQuantityIn(BaseModel):
    # 0 albo mniej usuwa linie
    quantity: int


# =====================================================
# CHECKOUT
# =====================================================
class DeliverySelectIn(BaseModel):
    delivery_type: DeliveryType


class NeighborhoodSelectIn(BaseModel):
    neighborhood_id: Optional[str] = None


class CustomerFormIn(BaseModel):
    """Czesciowa aktualizacja formularza, pola None sa pomijane."""

    name: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    district: Optional[str] = None
    notes: Optional[str] = None


class CheckoutOut(BaseModel):
    step: CheckoutStep
    delivery_type: Optional[DeliveryType] = None
    neighborhood_id: Optional[str] = None
    delivery_fee: Decimal
    subtotal: Decimal
    total: Decimal
    form: CustomerForm
    cart: Cart


class SubmitOut(BaseModel):
    order_number: str
    total: Decimal
    whatsapp_url: Optional[str] = None
    order: Order


# =====================================================
# ADMIN - KATALOG
# =====================================================
class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    active: Optional[bool] = None


class ReorderIn(BaseModel):
    ids: List[str]


class ImageIn(BaseModel):
    url: str = Field(..., min_length=1)
    is_main: bool = False
    position: Optional[int] = Field(None, ge=0)


class ImageUpdate(BaseModel):
    url: Optional[str] = Field(None, min_length=1)
    is_main: Optional[bool] = None
    position: Optional[int] = Field(None, ge=0)


class OptionIn(BaseModel):
    name: str = Field(..., min_length=1)
    price_modifier: Decimal = Decimal("0.00")
    stock: Optional[int] = Field(None, ge=0)


class OptionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    price_modifier: Optional[Decimal] = None
    stock: Optional[int] = Field(None, ge=0)


class GroupIn(BaseModel):
    name: str = Field(..., min_length=1)
    required: bool = False
    multiple_selection: bool = False
    options: List[OptionIn] = Field(default_factory=list)


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    required: Optional[bool] = None
    multiple_selection: Optional[bool] = None


class ProductIn(BaseModel):
    """Schema dla tworzenia produktu (razem z obrazkami i wariantami)."""

    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    category_id: Optional[str] = None
    stock_control: bool = False
    stock_quantity: int = Field(0, ge=0)
    auto_stock_reduction: bool = False
    active: bool = True
    images: List[ImageIn] = Field(default_factory=list)
    variation_groups: List[GroupIn] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[str] = None
    stock_control: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    auto_stock_reduction: Optional[bool] = None
    active: Optional[bool] = None


# =====================================================
# ADMIN - USTAWIENIA I ZAMOWIENIA
# =====================================================
class SettingsUpdate(BaseModel):
    store_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    whatsapp_number: Optional[str] = None
    contact_info: Optional[ContactInfo] = None
    social_links: Optional[List[SocialLink]] = None
    # czesciowy slownik, scalany z aktualnymi ustawieniami dostawy
    delivery: Optional[Dict[str, Any]] = None


class NeighborhoodIn(BaseModel):
    name: str = Field(..., min_length=1)
    fee: Decimal = Field(..., ge=0)


class NeighborhoodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    fee: Optional[Decimal] = Field(None, ge=0)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class OrderSummaryOut(BaseModel):
    """Wiersz listy zamowien w panelu."""

    id: int
    order_number: str
    customer_name: str
    total: Decimal
    status: OrderStatus
    whatsapp_sent: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
