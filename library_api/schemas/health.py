"""
Schemas Pydantic para o endpoint de healthcheck.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta do endpoint de healthcheck.

    Attributes:
        status: "healthy" ou "degraded" (banco inacessível)
        app_name: Nome da aplicação
        environment: Ambiente atual (development, staging, production)
        database: "ok" ou mensagem de erro da conexão
        redis: "ok" ou "unavailable" (sem Redis o rate limiting fica desligado)
    """

    status: str
    app_name: str
    environment: str
    database: str = "ok"
    redis: str = "unavailable"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Library API",
                    "environment": "development",
                    "database": "ok",
                    "redis": "ok",
                }
            ]
        }
    }
