# storefront/services/category_service.py
import uuid
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.mappers import category_from_row, category_values
from storefront.data.models.category import CategoryModel
from storefront.domain.entities import Category
from storefront.domain.errors import BackendError, NotFoundError
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    """Panel admina: kategorie (razem z nieaktywnymi)."""

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def _get_row(self, category_id: str) -> CategoryModel:
        row = self.repo.get_category(category_id)
        if not row:
            raise NotFoundError("Categoria não encontrada")
        return row

    #query
    def list_categories(self) -> List[Category]:
        return [category_from_row(r) for r in self.repo.list_categories()]

    def get_category(self, category_id: str) -> Category:
        return category_from_row(self._get_row(category_id))

    #commands
    def create_category(self, data: Dict[str, Any]) -> Category:
        if "position" not in data:
            data = {**data, "position": len(self.repo.list_categories())}

        row = CategoryModel(id=str(uuid.uuid4()), **category_values(data))
        try:
            created = self.repo.create_category(row)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad tworzenia kategorii {data.get('name')}: {e}")
            raise BackendError("Erro ao criar categoria") from e

        logger.info(f"Utworzono kategorie {created.id} ({created.name})")
        return category_from_row(created)

    def update_category(self, category_id: str, data: Dict[str, Any]) -> Category:
        row = self._get_row(category_id)
        try:
            updated = self.repo.update_category(row, category_values(data))
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad aktualizacji kategorii {category_id}: {e}")
            raise BackendError("Erro ao atualizar categoria") from e
        return category_from_row(updated)

    def delete_category(self, category_id: str) -> None:
        row = self._get_row(category_id)
        try:
            self.repo.delete_category(row)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad usuwania kategorii {category_id}: {e}")
            raise BackendError("Erro ao excluir categoria") from e
        logger.info(f"Usunieto kategorie {category_id}")

    def reorder(self, ordered_ids: List[str]) -> List[Category]:
        for category_id in ordered_ids:
            self._get_row(category_id)
        try:
            self.repo.set_positions(ordered_ids)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise BackendError("Erro ao reordenar categorias") from e
        return self.list_categories()
