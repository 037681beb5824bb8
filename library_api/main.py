"""
Ponto de entrada da aplicação FastAPI.

Este módulo configura a aplicação FastAPI, inclui rotas, registra os
handlers de exceção e define o ciclo de vida (startup/shutdown).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.exceptions import RedisError

from library_api.api.v1.router import api_router
from library_api.core.config import get_settings
from library_api.core.exceptions import register_exception_handlers
from library_api.core.logging import setup_logging
from library_api.db.redis import check_redis_connection, close_redis, init_redis
from library_api.db.session import check_database_connection, engine
from library_api.schemas.health import HealthResponse

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Startup:
        - Configura logging
        - Conecta ao Redis (opcional, usado pelo rate limiting)
        - Verifica conexão com o banco

    Shutdown:
        - Fecha conexão com Redis
        - Fecha pool de conexões do banco
    """
    setup_logging()
    logger.info(f"Iniciando {settings.APP_NAME} em ambiente {settings.ENVIRONMENT}")

    try:
        await init_redis()
        logger.info("Conexão com Redis estabelecida")
    except (RedisError, OSError) as e:
        logger.warning(f"Redis não disponível - rate limiting desabilitado: {e}")

    success, error = await check_database_connection()
    if success:
        logger.info("Conexão com o banco estabelecida")
    else:
        logger.warning(f"Banco não disponível: {error}")

    yield

    logger.info(f"Encerrando {settings.APP_NAME}")
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="API REST de biblioteca: acervo, usuários, empréstimos e devoluções",
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Inclui rotas da API v1
app.include_router(api_router)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Verifica status da aplicação",
    description="Retorna o status da aplicação e das conexões com banco e Redis.",
)
async def health_check() -> HealthResponse:
    """
    Endpoint de healthcheck para monitoramento.

    Retorna "degraded" quando o banco não responde. Redis fora do ar
    apenas desliga o rate limiting.
    """
    success, error = await check_database_connection()
    redis_ok = await check_redis_connection()
    return HealthResponse(
        status="healthy" if success else "degraded",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        database="ok" if success else (error or "unavailable"),
        redis="ok" if redis_ok else "unavailable",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("library_api.main:app", host=settings.HOST, port=settings.PORT)
