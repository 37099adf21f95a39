# storefront/repos/category_repo.py
from typing import Any, Dict, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self, active_only: bool = False) -> List[CategoryModel]:
        query = select(CategoryModel).order_by(CategoryModel.order_position, CategoryModel.name)
        if active_only:
            query = query.where(CategoryModel.active.is_(True))
        return list(self.db.execute(query).scalars().all())

    def get_category(self, category_id: str) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def update_category(self, category: CategoryModel, values: Dict[str, Any]) -> CategoryModel:
        for key, value in values.items():
            setattr(category, key, value)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        # produkty zostaja, tylko bez kategorii (sqlite nie pilnuje ON DELETE)
        self.db.execute(
            update(ProductModel).where(ProductModel.category_id == category.id).values(category_id=None)
        )
        self.db.delete(category)
        self.db.commit()

    def set_positions(self, ordered_ids: List[str]) -> None:
        for position, category_id in enumerate(ordered_ids):
            category = self.get_category(category_id)
            if category:
                category.order_position = position
        self.db.commit()

    def rollback(self):
        self.db.rollback()
