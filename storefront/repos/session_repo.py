# storefront/repos/session_repo.py
from pydantic import ValidationError

from storefront.domain.checkout import StorefrontSession
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SessionRepo:
    """
    Koszyk + stan checkoutu jednej sesji przegladarki, jeden dokument JSON w redisie.
    Odczyt na poczatku requestu, zapis po kazdej zmianie (last write wins).
    """

    KEY_PREFIX = "storefront:session:"

    def __init__(self, redis_client, ttl_seconds: int):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> StorefrontSession:
        raw = self.redis.get(self._key(session_id))
        if not raw:
            return StorefrontSession()

        try:
            return StorefrontSession.model_validate_json(raw)
        except ValidationError as e:
            # uszkodzony dokument - wyrzucamy i zaczynamy od pustej sesji
            logger.warning(f"Nie mozna odczytac sesji {session_id}, usuwam: {e}")
            self.redis.delete(self._key(session_id))
            return StorefrontSession()

    @redis_retry()
    def save(self, session_id: str, session: StorefrontSession) -> None:
        # sliding TTL, kazdy zapis przedluza zycie sesji
        self.redis.setex(self._key(session_id), self.ttl_seconds, session.model_dump_json())

    @redis_retry()
    def delete(self, session_id: str) -> None:
        self.redis.delete(self._key(session_id))
