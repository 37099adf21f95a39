# storefront/repos/snapshot_repo.py
import json
from typing import Any, Optional

from storefront.utils.retry import redis_retry


class SnapshotRepo:
    """Ostatnio poprawnie odczytane dane katalogu/ustawien, na wypadek awarii bazy."""

    PRODUCTS_KEY = "storefront:catalog:products"
    CATEGORIES_KEY = "storefront:catalog:categories"
    SETTINGS_KEY = "storefront:settings"

    def __init__(self, redis_client, ttl_seconds: int):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    @redis_retry()
    def get(self, key: str) -> Optional[Any]:
        raw = self.redis.get(key)
        if not raw:
            return None
        return json.loads(raw)

    @redis_retry()
    def put(self, key: str, payload: Any) -> None:
        self.redis.setex(key, self.ttl_seconds, json.dumps(payload))
