#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import (
    ProductModel,
    ProductImageModel,
    VariationGroupModel,
    VariationOptionModel,
)
from storefront.data.models.store_settings import StoreSettingsModel
from storefront.data.models.order import OrderModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "ProductImageModel",
    "VariationGroupModel",
    "VariationOptionModel",
    "StoreSettingsModel",
    "OrderModel",
]
