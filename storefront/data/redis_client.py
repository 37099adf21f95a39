# storefront/data/redis_client.py
from functools import lru_cache

import redis

from storefront.utils.settings import REDIS_URL


@lru_cache(maxsize=1)
def get_redis() -> redis.Redis:
    return redis.Redis.from_url(REDIS_URL, decode_responses=True)
