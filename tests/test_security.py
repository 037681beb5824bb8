"""
Testes unitários para funções de segurança.
"""

from datetime import timedelta

from jose import jwt

from library_api.core.config import get_settings
from library_api.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from library_api.models.enums import UserRole


class TestPasswordHashing:
    """Testes para hash de senha."""

    def test_hash_password_returns_hash(self):
        """Hash deve ser diferente da senha original."""
        hashed = hash_password("senha123")

        assert hashed != "senha123"
        assert hashed.startswith("$2")

    def test_hash_password_different_hashes(self):
        """Mesma senha gera hashes diferentes (salt)."""
        assert hash_password("senha123") != hash_password("senha123")

    def test_verify_password_correct(self):
        hashed = hash_password("senha123")
        assert verify_password("senha123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("senha123")
        assert verify_password("outra456", hashed) is False

    def test_verify_password_malformed_hash(self):
        """Hash inválido não levanta exceção, apenas falha."""
        assert verify_password("senha123", "nao-e-bcrypt") is False


class TestJWT:
    """Testes para JWT."""

    def test_token_roundtrip_carries_user_and_role(self):
        token = create_access_token(42, UserRole.LIBRARIAN)
        payload = decode_token(token)

        assert payload is not None
        assert payload.sub == 42
        assert payload.role == UserRole.LIBRARIAN

    def test_expired_token_is_rejected(self):
        token = create_access_token(1, UserRole.MEMBER, expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        settings = get_settings()
        forged = jwt.encode(
            {"sub": "1", "role": "LIBRARIAN", "exp": 9999999999},
            "outra-chave",
            algorithm=settings.JWT_ALGORITHM,
        )
        assert decode_token(forged) is None

    def test_token_without_role_is_rejected(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": "1", "exp": 9999999999},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert decode_token(token) is None

    def test_garbage_token_is_rejected(self):
        assert decode_token("isso.nao.e.jwt") is None
