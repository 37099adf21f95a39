# storefront/data/seed.py
from storefront.data.database import SessionLocal
from storefront.data.mappers import settings_values
from storefront.domain.entities import StoreSettings
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.settings import STORE_SETTINGS_ROW_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        repo = SettingsRepo(db, STORE_SETTINGS_ROW_ID)
        # not forcing: only seed if empty
        if repo.get_settings():
            return
        repo.upsert_settings(settings_values(StoreSettings()))
        logger.info(f"Utworzono domyslne ustawienia sklepu ({STORE_SETTINGS_ROW_ID})")
    finally:
        db.close()
