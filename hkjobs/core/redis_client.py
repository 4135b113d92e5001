from redis.asyncio import Redis

from loggers import get_logger

logger = get_logger(__name__)


def create_redis_client(dsn: str) -> Redis:
    """Redis connection shared by the token storage and the response cache."""
    try:
        return Redis.from_url(dsn, decode_responses=True)
    except ValueError:
        logger.error("[Redis] Invalid connection URL for %s", dsn.rsplit("@", 1)[-1])
        raise
