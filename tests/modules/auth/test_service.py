import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from modules.auth.exceptions import InvalidCredentialError, MissingCredentialError
from modules.auth.service import SupabaseCredentialVerifier


class TestSupabaseCredentialVerifier:
    @pytest.fixture
    def client(self):
        """Service-role Supabase client with a mocked auth API."""
        return MagicMock()

    @pytest.fixture
    def verifier(self, client):
        return SupabaseCredentialVerifier(client)

    @pytest.mark.asyncio
    async def test_verify_returns_identity(self, verifier, client):
        """Should delegate to auth.get_user and map the user."""
        client.auth.get_user.return_value = SimpleNamespace(
            user=SimpleNamespace(
                id="u1",
                email="a@x.com",
                user_metadata={"full_name": "Ann"},
            )
        )

        identity = await verifier.verify("provider-token")

        client.auth.get_user.assert_called_once_with("provider-token")
        assert identity.id == "u1"
        assert identity.email == "a@x.com"
        assert identity.full_name == "Ann"

    @pytest.mark.asyncio
    async def test_same_principal_gets_same_id(self, verifier, client):
        client.auth.get_user.return_value = SimpleNamespace(
            user=SimpleNamespace(id="u1", email="a@x.com", user_metadata={})
        )

        first = await verifier.verify("token-1")
        second = await verifier.verify("token-2")

        assert first.id == second.id == "u1"

    @pytest.mark.asyncio
    async def test_empty_token_never_reaches_provider(self, verifier, client):
        with pytest.raises(MissingCredentialError):
            await verifier.verify("")
        client.auth.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_rejection_is_invalid_credential(self, verifier, client):
        """Provider error text must not leak into the exception message."""
        client.auth.get_user.side_effect = Exception("JWT expired at 2026-03-01 (kid=abc)")

        with pytest.raises(InvalidCredentialError) as exc_info:
            await verifier.verify("expired-token")

        assert exc_info.value.message == "Invalid or expired token"
        assert "kid" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_is_invalid_credential(self, verifier, client):
        client.auth.get_user.side_effect = TimeoutError("read timed out")

        with pytest.raises(InvalidCredentialError):
            await verifier.verify("some-token")

    @pytest.mark.asyncio
    async def test_response_without_user_is_invalid_credential(self, verifier, client):
        client.auth.get_user.return_value = SimpleNamespace(user=None)

        with pytest.raises(InvalidCredentialError):
            await verifier.verify("some-token")

    @pytest.mark.asyncio
    async def test_user_without_id_is_invalid_credential(self, verifier, client):
        client.auth.get_user.return_value = SimpleNamespace(
            user=SimpleNamespace(id=None, email="a@x.com", user_metadata={})
        )

        with pytest.raises(InvalidCredentialError) as exc_info:
            await verifier.verify("some-token")

        assert exc_info.value.message == "Invalid or expired token"

    def test_defaults_to_service_role_client(self):
        with patch("modules.auth.service.get_supabase_client") as mock_client:
            verifier = SupabaseCredentialVerifier()
        mock_client.assert_called_once()
        assert verifier._db is mock_client.return_value
