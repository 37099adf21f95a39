# storefront/services/settings_service.py
import uuid
from decimal import Decimal
from typing import Any, Dict, Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.mappers import settings_from_row, settings_values
from storefront.domain.entities import Neighborhood, StoreSettings
from storefront.domain.errors import BackendError, NotFoundError
from storefront.repos.settings_repo import SettingsRepo
from storefront.repos.snapshot_repo import SnapshotRepo
from storefront.utils.settings import STORE_SETTINGS_ROW_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Slowniki scalane rekurencyjnie, listy i wartosci proste nadpisywane."""
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SettingsService:
    """
    Ustawienia sklepu (nazwa, whatsapp, dostawa).
    Odczyt: baza -> snapshot w redisie -> wartosci domyslne.
    """

    def __init__(self, db: Session, snapshots: SnapshotRepo, row_id: str | None = None):
        self.repo = SettingsRepo(db, row_id or STORE_SETTINGS_ROW_ID)
        self.snapshots = snapshots

    #query
    def get_settings(self) -> StoreSettings:
        try:
            row = self.repo.get_settings()
        except SQLAlchemyError as e:
            logger.warning(f"Blad odczytu ustawien sklepu, uzywam snapshotu: {e}")
            self.repo.rollback()
            return self._from_snapshot()

        if row is None:
            logger.info("Brak wiersza store_settings, uzywam wartosci domyslnych")
            return StoreSettings()

        settings = settings_from_row(row)
        self._snapshot(settings)
        return settings

    #commands
    def update_settings(self, updates: Dict[str, Any]) -> StoreSettings:
        current = self.get_settings()
        merged = StoreSettings.model_validate(
            deep_merge(current.model_dump(), updates)
        )
        return self._save(merged)

    def add_neighborhood(self, name: str, fee: Decimal) -> Neighborhood:
        settings = self.get_settings()
        neighborhood = Neighborhood(id=str(uuid.uuid4()), name=name, fee=fee)

        rates = settings.delivery.neighborhood_rates
        rates.neighborhoods.append(neighborhood)
        rates.enabled = True

        self._save(settings)
        logger.info(f"Dodano bairro {name} z oplata {fee}")
        return neighborhood

    def update_neighborhood(self, neighborhood_id: str, updates: Dict[str, Any]) -> Neighborhood:
        settings = self.get_settings()
        rates = settings.delivery.neighborhood_rates
        current = rates.find(neighborhood_id)
        if current is None:
            raise NotFoundError("Bairro não encontrado")

        updated = current.model_copy(update=updates)
        rates.neighborhoods = [updated if n.id == neighborhood_id else n for n in rates.neighborhoods]

        self._save(settings)
        return updated

    def remove_neighborhood(self, neighborhood_id: str) -> None:
        settings = self.get_settings()
        rates = settings.delivery.neighborhood_rates
        if rates.find(neighborhood_id) is None:
            raise NotFoundError("Bairro não encontrado")

        rates.neighborhoods = [n for n in rates.neighborhoods if n.id != neighborhood_id]
        self._save(settings)

    def _save(self, settings: StoreSettings) -> StoreSettings:
        try:
            row = self.repo.upsert_settings(settings_values(settings))
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zapisu ustawien sklepu: {e}")
            raise BackendError("Falha ao salvar configurações da loja") from e

        saved = settings_from_row(row)
        self._snapshot(saved)
        logger.info("Ustawienia sklepu zapisane")
        return saved

    def _snapshot(self, settings: StoreSettings) -> None:
        try:
            self.snapshots.put(SnapshotRepo.SETTINGS_KEY, settings.model_dump(mode="json"))
        except RedisError as e:
            logger.warning(f"Nie udalo sie zapisac snapshotu ustawien: {e}")

    def _from_snapshot(self) -> StoreSettings:
        try:
            cached = self.snapshots.get(SnapshotRepo.SETTINGS_KEY)
            if cached is not None:
                return StoreSettings.model_validate(cached)
        except (RedisError, ValueError) as e:
            logger.warning(f"Nie udalo sie odczytac snapshotu ustawien: {e}")
        return StoreSettings()
