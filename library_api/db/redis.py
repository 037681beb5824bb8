"""
Conexão com Redis, usada pelo rate limiting.

O cliente é criado no startup da aplicação. Sem Redis a API continua
funcionando, apenas sem rate limiting.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Cliente Redis (inicializado no startup)
redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """
    Inicializa a conexão com o Redis e valida com PING.

    Raises:
        RedisError: Redis inacessível (o cliente é fechado e não fica
            registrado)
    """
    global redis_client
    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except (RedisError, OSError):
        await client.aclose()
        raise
    redis_client = client
    return redis_client


async def close_redis() -> None:
    """Fecha a conexão com o Redis."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """True se o Redis responde ao PING."""
    if redis_client is None:
        return False
    try:
        await redis_client.ping()
        return True
    except RedisError as e:
        logger.warning(f"Erro ao verificar conexão Redis: {e}")
        return False
