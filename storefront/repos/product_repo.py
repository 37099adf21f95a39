# storefront/repos/product_repo.py
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.product import (
    ProductImageModel,
    ProductModel,
    VariationGroupModel,
    VariationOptionModel,
)


def _apply(row, values: Dict[str, Any]):
    for key, value in values.items():
        setattr(row, key, value)
    return row


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def _with_relations(self):
        return select(ProductModel).options(
            selectinload(ProductModel.category),
            selectinload(ProductModel.images),
            selectinload(ProductModel.variation_groups).selectinload(VariationGroupModel.options),
        )

    # =====================================================
    # PRODUKTY
    # =====================================================
    def list_products(
        self, active_only: bool = False, category_id: Optional[str] = None
    ) -> List[ProductModel]:
        query = self._with_relations().order_by(ProductModel.name)
        if active_only:
            query = query.where(ProductModel.active.is_(True))
        if category_id:
            query = query.where(ProductModel.category_id == category_id)
        return list(self.db.execute(query).scalars().all())

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.execute(
            self._with_relations().where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        return self.get_product(product.id)

    def update_product(self, product: ProductModel, values: Dict[str, Any]) -> ProductModel:
        _apply(product, values)
        self.db.commit()
        return self.get_product(product.id)

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    # =====================================================
    # OBRAZKI
    # =====================================================
    def get_image(self, image_id: str) -> ProductImageModel | None:
        return self.db.get(ProductImageModel, image_id)

    def add_image(self, image: ProductImageModel) -> ProductImageModel:
        self.db.add(image)
        self.db.commit()
        self.db.refresh(image)
        return image

    def update_image(self, image: ProductImageModel, values: Dict[str, Any]) -> ProductImageModel:
        _apply(image, values)
        self.db.commit()
        self.db.refresh(image)
        return image

    def delete_image(self, image: ProductImageModel) -> None:
        self.db.delete(image)
        self.db.commit()

    def set_main_image(self, product_id: str, image_id: str) -> None:
        # dokladnie jeden glowny obrazek na produkt
        images = self.db.execute(
            select(ProductImageModel).where(ProductImageModel.product_id == product_id)
        ).scalars().all()
        for image in images:
            image.is_main = image.id == image_id
        self.db.commit()

    def set_image_positions(self, product_id: str, ordered_ids: List[str]) -> None:
        positions = {image_id: i for i, image_id in enumerate(ordered_ids)}
        images = self.db.execute(
            select(ProductImageModel).where(ProductImageModel.product_id == product_id)
        ).scalars().all()
        for image in images:
            if image.id in positions:
                image.order_position = positions[image.id]
        self.db.commit()

    # =====================================================
    # GRUPY I OPCJE WARIANTOW
    # =====================================================
    def get_group(self, group_id: str) -> VariationGroupModel | None:
        return self.db.get(VariationGroupModel, group_id)

    def add_group(self, group: VariationGroupModel) -> VariationGroupModel:
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    def update_group(self, group: VariationGroupModel, values: Dict[str, Any]) -> VariationGroupModel:
        _apply(group, values)
        self.db.commit()
        self.db.refresh(group)
        return group

    def delete_group(self, group: VariationGroupModel) -> None:
        self.db.delete(group)
        self.db.commit()

    def get_option(self, option_id: str) -> VariationOptionModel | None:
        return self.db.get(VariationOptionModel, option_id)

    def add_option(self, option: VariationOptionModel) -> VariationOptionModel:
        self.db.add(option)
        self.db.commit()
        self.db.refresh(option)
        return option

    def update_option(self, option: VariationOptionModel, values: Dict[str, Any]) -> VariationOptionModel:
        _apply(option, values)
        self.db.commit()
        self.db.refresh(option)
        return option

    def delete_option(self, option: VariationOptionModel) -> None:
        self.db.delete(option)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
