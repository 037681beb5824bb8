"""
Model de usuário do sistema.
"""

from typing import Optional

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from library_api.db.session import Base
from library_api.models.base import IntIDMixin, TimestampMixin
from library_api.models.enums import UserRole


class User(Base, IntIDMixin, TimestampMixin):
    """
    Usuário da biblioteca (membro ou bibliotecário).

    Attributes:
        id: ID inteiro do usuário
        username: Login único
        email: Email único
        full_name: Nome completo
        phone_number: Telefone de contato (opcional)
        password_hash: Hash bcrypt da senha
        role: LIBRARIAN ou MEMBER
    """
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.MEMBER,
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"

    @property
    def is_librarian(self) -> bool:
        return self.role == UserRole.LIBRARIAN
