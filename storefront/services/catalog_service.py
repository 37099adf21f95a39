# storefront/services/catalog_service.py
from typing import List, Optional

from pydantic import TypeAdapter
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.mappers import category_from_row, product_from_row
from storefront.domain.entities import Category, Product
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_products_adapter = TypeAdapter(List[Product])
_categories_adapter = TypeAdapter(List[Category])


class CatalogService:
    """
    Odczyt katalogu dla sklepu (tylko aktywne produkty/kategorie).
    Baza niedostepna -> ostatni snapshot z redisa -> pusta lista.
    """

    def __init__(self, db: Session, snapshots: SnapshotRepo):
        self.products = ProductRepo(db)
        self.categories = CategoryRepo(db)
        self.snapshots = snapshots

    #query
    def list_products(self, category_id: Optional[str] = None) -> List[Product]:
        try:
            rows = self.products.list_products(active_only=True)
            products = [product_from_row(r) for r in rows]
        except SQLAlchemyError as e:
            logger.warning(f"Blad odczytu produktow z bazy, uzywam snapshotu: {e}")
            self.products.rollback()
            products = self._from_snapshot(SnapshotRepo.PRODUCTS_KEY, _products_adapter)
        else:
            self._snapshot(SnapshotRepo.PRODUCTS_KEY, _products_adapter.dump_python(products, mode="json"))

        if category_id:
            products = [p for p in products if p.category_id == category_id]
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            row = self.products.get_product(product_id)
        except SQLAlchemyError as e:
            logger.warning(f"Blad odczytu produktu {product_id}, szukam w snapshocie: {e}")
            self.products.rollback()
            cached = self._from_snapshot(SnapshotRepo.PRODUCTS_KEY, _products_adapter)
            return next((p for p in cached if p.id == product_id), None)

        if row is None or not row.active:
            return None
        return product_from_row(row)

    def list_categories(self) -> List[Category]:
        try:
            rows = self.categories.list_categories(active_only=True)
            categories = [category_from_row(r) for r in rows]
        except SQLAlchemyError as e:
            logger.warning(f"Blad odczytu kategorii z bazy, uzywam snapshotu: {e}")
            self.categories.rollback()
            return self._from_snapshot(SnapshotRepo.CATEGORIES_KEY, _categories_adapter)

        self._snapshot(SnapshotRepo.CATEGORIES_KEY, _categories_adapter.dump_python(categories, mode="json"))
        return categories

    # snapshot to tylko zabezpieczenie, jego bledy nie przerywaja odczytu
    def _snapshot(self, key: str, payload) -> None:
        try:
            self.snapshots.put(key, payload)
        except RedisError as e:
            logger.warning(f"Nie udalo sie zapisac snapshotu {key}: {e}")

    def _from_snapshot(self, key: str, adapter: TypeAdapter) -> list:
        # ValidationError pydantica dziedziczy po ValueError (stary format snapshotu)
        try:
            cached = self.snapshots.get(key)
            if cached is None:
                logger.warning(f"Brak snapshotu {key}, zwracam pusta liste")
                return []
            return adapter.validate_python(cached)
        except (RedisError, ValueError) as e:
            logger.warning(f"Nie udalo sie odczytac snapshotu {key}: {e}")
            return []
