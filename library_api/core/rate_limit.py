"""
Rate limiting usando Redis com janela fixa.

Limita por usuário autenticado (sub do JWT) ou por IP para anônimos.
Configurável via variáveis de ambiente:
    - RATE_LIMIT_ENABLED: liga/desliga o rate limiting
    - RATE_LIMIT_REQUESTS: requests permitidos por janela
    - RATE_LIMIT_WINDOW_SECONDS: tamanho da janela em segundos

Se o Redis estiver indisponível a requisição passa (fail-open).

Uso:
    @router.post("/transactions/borrow")
    async def borrow(_: None = Depends(rate_limit_transactions)):
        ...
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.exceptions import RedisError

from library_api.core.config import get_settings
from library_api.core.security import decode_token
from library_api.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()
optional_bearer = HTTPBearer(auto_error=False)


class RateLimiter:
    """
    Dependency para rate limiting usando Redis.

    Args:
        requests: Número máximo de requests na janela (default: config)
        window: Janela de tempo em segundos (default: config)
        key_prefix: Prefixo da chave no Redis
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        key_prefix: str = "rate_limit",
    ):
        self.requests = requests or settings.RATE_LIMIT_REQUESTS
        self.window = window or settings.RATE_LIMIT_WINDOW_SECONDS
        self.key_prefix = key_prefix

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
    ) -> None:
        """
        Verifica rate limit.

        Raises:
            HTTPException 429: Rate limit excedido
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = redis_db.redis_client
        if client is None:
            return

        key = f"{self.key_prefix}:{self._get_identifier(request, credentials)}"

        try:
            current = await client.incr(key)

            # Primeiro request da janela define o TTL
            if current == 1:
                await client.expire(key, self.window)

            if current > self.requests:
                ttl = await client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit excedido. Tente novamente em {ttl} segundos.",
                    headers={"Retry-After": str(ttl)},
                )
        except RedisError as e:
            logger.warning(f"Rate limit ignorado, erro no Redis: {e}")

    def _get_identifier(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        """
        Identificador do cliente.

        Prioridade:
            1. user_id do JWT (se válido)
            2. Primeiro IP de X-Forwarded-For
            3. IP da conexão
        """
        if credentials:
            payload = decode_token(credentials.credentials)
            if payload:
                return f"user:{payload.sub}"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"


# Instâncias pré-configuradas
rate_limit_default = RateLimiter()
rate_limit_auth = RateLimiter(requests=10, window=60, key_prefix="rate_limit:auth")
rate_limit_transactions = RateLimiter(
    requests=30,
    window=60,
    key_prefix="rate_limit:transactions",
)
