"""
Testes de integração para endpoints de Users.
"""

import pytest
from httpx import AsyncClient

from library_api.services.transaction import TransactionService

USERS_URL = "/api/v1/users"


class TestUserAccess:
    """Leitura de usuários e regras de acesso."""

    @pytest.mark.anyio
    async def test_member_reads_self(self, client: AsyncClient, member, member_headers):
        response = await client.get(f"{USERS_URL}/{member.id}", headers=member_headers)

        assert response.status_code == 200
        assert response.json()["username"] == member.username

    @pytest.mark.anyio
    async def test_member_cannot_read_other(self, client: AsyncClient, member_headers, other_member):
        response = await client.get(f"{USERS_URL}/{other_member.id}", headers=member_headers)

        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_librarian_reads_any(self, client: AsyncClient, librarian_headers, member):
        response = await client.get(f"{USERS_URL}/{member.id}", headers=librarian_headers)

        assert response.status_code == 200

    @pytest.mark.anyio
    async def test_get_unknown_user(self, client: AsyncClient, librarian_headers):
        response = await client.get(f"{USERS_URL}/9999", headers=librarian_headers)

        assert response.status_code == 404

    @pytest.mark.anyio
    async def test_search_by_username(self, client: AsyncClient, librarian_headers, member):
        response = await client.get(
            f"{USERS_URL}/search/{member.username}",
            headers=librarian_headers,
        )

        assert response.status_code == 200
        assert response.json()["id"] == member.id

    @pytest.mark.anyio
    async def test_search_by_username_as_member(self, client: AsyncClient, member_headers, member):
        response = await client.get(
            f"{USERS_URL}/search/{member.username}",
            headers=member_headers,
        )

        assert response.status_code == 403

    @pytest.mark.anyio
    async def test_list_users_filters(
        self, client: AsyncClient, librarian_headers, member, other_member
    ):
        members = await client.get(
            USERS_URL,
            params={"role": "MEMBER"},
            headers=librarian_headers,
        )
        by_text = await client.get(
            USERS_URL,
            params={"search": "brun"},
            headers=librarian_headers,
        )

        assert members.status_code == 200
        assert members.json()["total"] == 2
        assert [u["username"] for u in by_text.json()["items"]] == [other_member.username]


class TestUserManagement:
    """Criação, alteração e remoção."""

    @pytest.mark.anyio
    async def test_librarian_creates_librarian(self, client: AsyncClient, librarian_headers):
        response = await client.post(
            USERS_URL,
            json={
                "username": "carla",
                "email": "carla@example.com",
                "password": "senha123",
                "full_name": "Carla Souza",
                "role": "LIBRARIAN",
            },
            headers=librarian_headers,
        )

        assert response.status_code == 201
        assert response.json()["role"] == "LIBRARIAN"

    @pytest.mark.anyio
    async def test_member_updates_own_profile(self, client: AsyncClient, member, member_headers):
        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"full_name": "Alice Pereira", "phone_number": "+55 11 99999-0000"},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Alice Pereira"
        assert response.json()["phone_number"] == "+55 11 99999-0000"

    @pytest.mark.anyio
    async def test_member_cannot_promote_self(self, client: AsyncClient, member, member_headers):
        """role enviada por membro é ignorada."""
        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"role": "LIBRARIAN"},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json()["role"] == "MEMBER"

    @pytest.mark.anyio
    async def test_librarian_changes_role(self, client: AsyncClient, librarian_headers, member):
        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"role": "LIBRARIAN"},
            headers=librarian_headers,
        )

        assert response.json()["role"] == "LIBRARIAN"

    @pytest.mark.anyio
    async def test_update_email_conflict(
        self, client: AsyncClient, member, member_headers, other_member
    ):
        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"email": other_member.email},
            headers=member_headers,
        )

        assert response.status_code == 409

    @pytest.mark.anyio
    async def test_delete_user(self, client: AsyncClient, librarian_headers, other_member):
        response = await client.delete(
            f"{USERS_URL}/{other_member.id}",
            headers=librarian_headers,
        )

        assert response.status_code == 204

    @pytest.mark.anyio
    async def test_delete_user_with_transactions(
        self, client: AsyncClient, librarian_headers, test_db, member, book
    ):
        await TransactionService(test_db).borrow(member.id, book.id)

        response = await client.delete(f"{USERS_URL}/{member.id}", headers=librarian_headers)

        assert response.status_code == 409

    @pytest.mark.anyio
    async def test_clear_phone_number(self, client: AsyncClient, member, member_headers):
        """null explícito limpa o campo opcional e mantém o resto."""
        await client.put(
            f"{USERS_URL}/{member.id}",
            json={"phone_number": "+55 11 99999-0000"},
            headers=member_headers,
        )

        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"phone_number": None},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json()["phone_number"] is None
        assert response.json()["full_name"] == member.full_name

    @pytest.mark.anyio
    async def test_update_password_over_72_bytes(self, client: AsyncClient, member, member_headers):
        response = await client.put(
            f"{USERS_URL}/{member.id}",
            json={"password": "é" * 70 + "a1"},
            headers=member_headers,
        )

        assert response.status_code == 422
