# storefront/services/lock_service.py
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec zdejmujemy tylko swoj wlasny lock (token), nigdy cudzy


class LockService:
    """
    -blokada wysylki zamowienia dla sesji (jedno zamowienie w locie)
    -zwalnianie blokady
    -atomowosc przy pomocy lua
    """

    def __init__(self, redis_client):
        self.redis = redis_client

    @staticmethod
    def _submit_key(session_id: str) -> str:
        return f"checkout:{session_id}:submit"

    @redis_retry()
    def acquire_submit_lock(self, session_id: str, token: str, ttl: int) -> bool:
        key = self._submit_key(session_id)
        logger.info(f"Acquire lock {key}")
        #SET checkout:abc:submit "<token>" NX EX 30
        return bool(self.redis.set(
            name=key,
            value=token,
            nx=True, #tylko jesli klucz nie istnieje
            ex=ttl, #wygasa sam, gdyby proces padl w trakcie wysylki
        ))

    @redis_retry()
    def release_submit_lock(self, session_id: str, token: str) -> bool:
        key = self._submit_key(session_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
