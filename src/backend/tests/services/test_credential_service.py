"""
Tests for email/password credential verification.
"""

import threading
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.mark.integration
class TestCredentialVerifier:
    """CredentialVerifier against a real (SQLite) users table."""

    async def test_valid_credentials_return_session_record(self, db_session, user_factory):
        from schemas.session import SessionRecord
        from services.credential_service import CredentialVerifier

        user = await user_factory(
            email="grantee@example.org",
            name="Ana Reyes",
            batch="2024",
            phone_number="0917",
            address="Quezon City",
        )

        result = await CredentialVerifier(db_session).verify("grantee@example.org", DEFAULT_PASSWORD)

        assert isinstance(result, SessionRecord)
        assert result.id == str(user.id)
        assert result.email == "grantee@example.org"
        assert result.role == "user"
        assert result.status == "active"
        assert result.batch == "2024"
        assert result.phone_number == "0917"
        assert result.address == "Quezon City"

    async def test_wrong_password_is_rejected(self, db_session, user_factory):
        from services.credential_service import CredentialVerifier, Rejected, RejectionReason

        await user_factory(email="grantee@example.org")

        result = await CredentialVerifier(db_session).verify("grantee@example.org", "wrong")

        assert result == Rejected(RejectionReason.INVALID_CREDENTIALS)

    async def test_unknown_email_gives_same_rejection(self, db_session):
        from services.credential_service import CredentialVerifier, Rejected

        result = await CredentialVerifier(db_session).verify("nobody@example.org", DEFAULT_PASSWORD)

        assert result == Rejected()

    async def test_email_match_is_exact(self, db_session, user_factory):
        from services.credential_service import CredentialVerifier, Rejected

        await user_factory(email="grantee@example.org")

        result = await CredentialVerifier(db_session).verify("Grantee@Example.org", DEFAULT_PASSWORD)

        assert isinstance(result, Rejected)

    async def test_inactive_status_is_carried_not_blocked(self, db_session, user_factory):
        from schemas.session import SessionRecord
        from services.credential_service import CredentialVerifier

        await user_factory(email="old@example.org", status="inactive")

        result = await CredentialVerifier(db_session).verify("old@example.org", DEFAULT_PASSWORD)

        assert isinstance(result, SessionRecord)
        assert result.status == "inactive"


@pytest.mark.unit
class TestCredentialVerifierUnit:
    """Edge cases that never reach the database."""

    @pytest.mark.parametrize("email,password", [("", "pw"), ("a@example.org", ""), ("", "")])
    async def test_blank_input_is_rejected_without_lookup(self, mock_db_session, email, password):
        from services.credential_service import CredentialVerifier, Rejected

        result = await CredentialVerifier(mock_db_session).verify(email, password)

        assert isinstance(result, Rejected)
        mock_db_session.execute.assert_not_called()

    async def test_unknown_email_still_runs_bcrypt(self, mock_db_session):
        from services.credential_service import CredentialVerifier

        verifier = CredentialVerifier(mock_db_session)
        verifier.users.get_by_email = AsyncMock(return_value=None)

        with patch("services.credential_service.verify_password", return_value=False) as check:
            await verifier.verify("nobody@example.org", "pw")

        check.assert_called_once()

    @pytest.mark.parametrize("known_user", [False, True])
    async def test_bcrypt_runs_off_the_event_loop(self, mock_db_session, known_user):
        from services.credential_service import CredentialVerifier

        user = MagicMock(id="u-1", password_hash="$2b$04$stored") if known_user else None
        verifier = CredentialVerifier(mock_db_session)
        verifier.users.get_by_email = AsyncMock(return_value=user)
        threads = []

        def check(password, password_hash):
            threads.append(threading.get_ident())
            return False

        with patch("services.credential_service.verify_password", side_effect=check):
            await verifier.verify("someone@example.org", "pw")

        assert len(threads) == 1
        assert threads[0] != threading.get_ident()
