"""
Tests for the Firebase identity adapter.

Tests: IdentityService.get_email_verified — verified/unverified users,
unknown uid, invalid uid, provider errors.
"""
from unittest.mock import MagicMock, patch

import pytest
from firebase_admin import auth, exceptions as firebase_exceptions

from domain.errors import IdentityLookupError, NotFoundError
from services.identity_service import IdentityService


def _user(email_verified: bool):
    user = MagicMock()
    user.email_verified = email_verified
    return user


class TestGetEmailVerified:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_verified_user(self, firebase_app):
        with patch.object(auth, "get_user", return_value=_user(True)) as get_user:
            assert await IdentityService(firebase_app).get_email_verified("uid-123") is True
        get_user.assert_called_once_with("uid-123", app=firebase_app)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unverified_user(self, firebase_app):
        with patch.object(auth, "get_user", return_value=_user(False)):
            assert await IdentityService(firebase_app).get_email_verified("uid-123") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_uid_is_not_found(self, firebase_app):
        error = auth.UserNotFoundError("No user record found for the provided user ID: ghost.")
        with patch.object(auth, "get_user", side_effect=error):
            with pytest.raises(IdentityLookupError) as exc_info:
                await IdentityService(firebase_app).get_email_verified("ghost")
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.status_code == 404
        assert "No user record found" in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_uid_is_not_found(self, firebase_app):
        with patch.object(auth, "get_user", side_effect=ValueError("Invalid uid: must be 128 characters or fewer")):
            with pytest.raises(IdentityLookupError, match="Invalid uid"):
                await IdentityService(firebase_app).get_email_verified("x" * 200)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_provider_error_is_not_found(self, firebase_app):
        error = firebase_exceptions.UnavailableError("Service unavailable")
        with patch.object(auth, "get_user", side_effect=error):
            with pytest.raises(IdentityLookupError, match="Service unavailable"):
                await IdentityService(firebase_app).get_email_verified("uid-123")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_uid_rejected_without_call(self, firebase_app):
        with patch.object(auth, "get_user") as get_user:
            with pytest.raises(IdentityLookupError):
                await IdentityService(firebase_app).get_email_verified("")
        get_user.assert_not_called()
