# storefront/repos/settings_repo.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.store_settings import StoreSettingsModel


class SettingsRepo:
    """Jeden wiersz store_settings o stalym id."""

    def __init__(self, db: Session, row_id: str):
        self.db = db
        self.row_id = row_id

    def get_settings(self) -> StoreSettingsModel | None:
        return self.db.get(StoreSettingsModel, self.row_id)

    def upsert_settings(self, values: Dict[str, Any]) -> StoreSettingsModel:
        row = self.get_settings()
        if row is None:
            row = StoreSettingsModel(id=self.row_id, **values)
            self.db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def rollback(self):
        self.db.rollback()
