"""
Repository base com operações CRUD genéricas.
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.db.session import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Fornece métodos genéricos para:
    - get_by_id: Buscar por ID
    - create: Criar registro
    - add: Incluir registro sem commit
    - update: Atualizar registro
    - delete: Remover registro

    create/update/delete fazem commit. Fluxos que precisam de várias
    escritas atômicas usam add() e deixam o commit para o serviço.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: int) -> ModelType | None:
        """Busca registro por ID."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria novo registro."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def add(self, instance: ModelType) -> ModelType:
        """Adiciona registro à unidade de trabalho atual (flush, sem commit)."""
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def update(
        self,
        instance: ModelType,
        **kwargs: Any,
    ) -> ModelType:
        """
        Atualiza registro existente.

        Todos os valores recebidos são aplicados, inclusive None (limpa o
        campo). Quem chama passa apenas os campos alterados.
        """
        for key, value in kwargs.items():
            setattr(instance, key, value)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Remove registro."""
        await self.db.delete(instance)
        await self.db.commit()

