"""
Schemas Pydantic para Book.
"""

from pydantic import Field, computed_field

from library_api.schemas.base import BaseSchema, TimestampSchema


class BookCreate(BaseSchema):
    """
    Schema para cadastro de livro.

    available_copies não é informado: nasce igual a total_copies.
    """
    title: str = Field(..., min_length=1, max_length=255, examples=["Dom Casmurro"])
    author: str = Field(..., min_length=1, max_length=255, examples=["Machado de Assis"])
    isbn: str = Field(..., min_length=10, max_length=20, examples=["9788535911664"])
    publisher: str | None = Field(None, max_length=255)
    publication_year: int | None = Field(None, ge=0, le=9999)
    category: str | None = Field(None, max_length=100, examples=["Romance"])
    total_copies: int = Field(..., ge=1, examples=[3])
    description: str | None = None


class BookUpdate(BaseSchema):
    """
    Schema para atualização de livro.

    Alterar total_copies preserva o número de exemplares emprestados.
    """
    title: str | None = Field(None, min_length=1, max_length=255)
    author: str | None = Field(None, min_length=1, max_length=255)
    isbn: str | None = Field(None, min_length=10, max_length=20)
    publisher: str | None = Field(None, max_length=255)
    publication_year: int | None = Field(None, ge=0, le=9999)
    category: str | None = Field(None, max_length=100)
    total_copies: int | None = Field(None, ge=1)
    description: str | None = None


class BookRead(TimestampSchema):
    """Schema para leitura de livro."""
    id: int
    title: str
    author: str
    isbn: str
    publisher: str | None = None
    publication_year: int | None = None
    category: str | None = None
    total_copies: int
    available_copies: int
    description: str | None = None

    @computed_field
    @property
    def is_available(self) -> bool:
        return self.available_copies > 0
