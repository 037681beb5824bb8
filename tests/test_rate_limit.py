"""
Testes unitários para Rate Limiting.

Usa mocks para Redis para testar a lógica sem dependência externa.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException, Request
from redis.exceptions import ConnectionError as RedisConnectionError

from library_api.core.rate_limit import RateLimiter
from library_api.core.security import TokenPayload
from library_api.models.enums import UserRole


@pytest.fixture
def mock_request():
    """Cria mock de Request."""
    request = MagicMock(spec=Request)
    request.client.host = "127.0.0.1"
    request.headers = {}
    return request


@pytest.fixture
def enabled_settings():
    with patch("library_api.core.rate_limit.settings") as mock_settings:
        mock_settings.RATE_LIMIT_ENABLED = True
        yield mock_settings


class TestRateLimiter:
    """Testes para o RateLimiter."""

    @pytest.mark.anyio
    async def test_disabled_allows_all(self, mock_request):
        """Com rate limit desligado o Redis nem é consultado."""
        mock_redis = AsyncMock()

        with patch("library_api.core.rate_limit.settings") as mock_settings, \
             patch("library_api.db.redis.redis_client", mock_redis):
            mock_settings.RATE_LIMIT_ENABLED = False

            await RateLimiter(requests=1, window=60)(mock_request, None)

        mock_redis.incr.assert_not_called()

    @pytest.mark.anyio
    async def test_without_redis_allows_all(self, mock_request, enabled_settings):
        """Sem cliente Redis registrado, permite (fail-open)."""
        with patch("library_api.db.redis.redis_client", None):
            await RateLimiter(requests=1, window=60)(mock_request, None)

    @pytest.mark.anyio
    async def test_first_request_sets_ttl(self, mock_request, enabled_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 1

        with patch("library_api.db.redis.redis_client", mock_redis):
            await RateLimiter(requests=5, window=60, key_prefix="rl")(mock_request, None)

        mock_redis.incr.assert_awaited_once_with("rl:ip:127.0.0.1")
        mock_redis.expire.assert_awaited_once_with("rl:ip:127.0.0.1", 60)

    @pytest.mark.anyio
    async def test_within_limit(self, mock_request, enabled_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 5

        with patch("library_api.db.redis.redis_client", mock_redis):
            await RateLimiter(requests=5, window=60)(mock_request, None)

        mock_redis.expire.assert_not_called()

    @pytest.mark.anyio
    async def test_exceeded_raises_429(self, mock_request, enabled_settings):
        """Acima do limite: 429 com Retry-After."""
        mock_redis = AsyncMock()
        mock_redis.incr.return_value = 6
        mock_redis.ttl.return_value = 45

        with patch("library_api.db.redis.redis_client", mock_redis):
            with pytest.raises(HTTPException) as exc_info:
                await RateLimiter(requests=5, window=60)(mock_request, None)

        assert exc_info.value.status_code == 429
        assert "Rate limit excedido" in exc_info.value.detail
        assert exc_info.value.headers["Retry-After"] == "45"

    @pytest.mark.anyio
    async def test_redis_error_fails_open(self, mock_request, enabled_settings):
        mock_redis = AsyncMock()
        mock_redis.incr.side_effect = RedisConnectionError("conexão recusada")

        with patch("library_api.db.redis.redis_client", mock_redis):
            await RateLimiter(requests=1, window=60)(mock_request, None)


class TestIdentifier:
    """Escolha da chave do rate limit."""

    def test_uses_jwt_subject(self, mock_request):
        credentials = MagicMock()
        credentials.credentials = "token"
        payload = TokenPayload(sub=42, role=UserRole.MEMBER, exp=4102444800)

        with patch("library_api.core.rate_limit.decode_token", return_value=payload):
            identifier = RateLimiter()._get_identifier(mock_request, credentials)

        assert identifier == "user:42"

    def test_invalid_jwt_falls_back_to_ip(self, mock_request):
        credentials = MagicMock()
        credentials.credentials = "lixo"

        with patch("library_api.core.rate_limit.decode_token", return_value=None):
            identifier = RateLimiter()._get_identifier(mock_request, credentials)

        assert identifier == "ip:127.0.0.1"

    def test_uses_forwarded_for(self, mock_request):
        mock_request.headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        assert RateLimiter()._get_identifier(mock_request, None) == "ip:203.0.113.7"
