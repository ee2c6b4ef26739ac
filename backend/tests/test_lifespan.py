"""
Tests for application startup and shutdown.

Runs the real lifespan with the SDK constructors patched, so the clients on
app.state are the ones a deployed process would build.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import config
from main import app, lifespan
from tests.conftest import KNOWN_TRANSACTION_ID, settlement_status


@pytest.fixture
def no_firebase(monkeypatch):
    monkeypatch.setattr(config.settings, "firebase_private_key", "")
    monkeypatch.setattr(config.settings, "firebase_client_email", "")
    monkeypatch.setattr(config.settings, "environment", "development")
    monkeypatch.setattr(config.settings, "order_store_backend", "sql")


@pytest.fixture
def snap():
    snap = MagicMock()
    snap.transactions.notification.return_value = settlement_status()
    with patch("midtrans_client.midtransclient.Snap", return_value=snap):
        yield snap


@pytest.fixture
def init_db():
    with patch("database.init_db", new_callable=AsyncMock) as init_db:
        yield init_db


@pytest_asyncio.fixture
async def reset_state():
    yield
    for name in ("firebase", "payment_gateway"):
        if hasattr(app.state, name):
            delattr(app.state, name)


class TestStartupWithoutFirebase:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_starts_and_serves_payments(self, no_firebase, snap, init_db, reset_state):
        async with lifespan(app):
            assert app.state.firebase is None
            init_db.assert_awaited_once()

            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as c:
                health = (await c.get("/health")).json()
                assert health["firebase_initialized"] is False
                assert health["gateway_initialized"] is True

                detail = await c.get(f"/det/{KNOWN_TRANSACTION_ID}")
                assert detail.status_code == 200
                assert detail.json()["transaction_status"] == "settlement"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_identity_lookup_reports_not_configured(self, no_firebase, snap, init_db, reset_state):
        async with lifespan(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as c:
                response = await c.get("/status/user-1")

        assert response.status_code == 404
        assert response.json() == {
            "status_code": "404",
            "error_message": "Identity provider is not configured",
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_firestore_store_needs_credentials(self, no_firebase, snap, init_db, reset_state, monkeypatch):
        monkeypatch.setattr(config.settings, "order_store_backend", "firestore")
        with pytest.raises(ValueError, match="firestore"):
            async with lifespan(app):
                pass
        init_db.assert_not_awaited()


class TestStartupWithFirebase:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_firebase_app_built_and_deleted(self, snap, init_db, reset_state, monkeypatch):
        monkeypatch.setattr(config.settings, "firebase_private_key", "key\\nbody")
        monkeypatch.setattr(config.settings, "firebase_client_email", "svc@shop.iam.gserviceaccount.com")
        monkeypatch.setattr(config.settings, "environment", "development")
        monkeypatch.setattr(config.settings, "order_store_backend", "sql")

        firebase_app = MagicMock(name="App")
        with patch("firebase_client.credentials.Certificate"), \
             patch("firebase_client.firebase_admin.initialize_app", return_value=firebase_app), \
             patch("firebase_client.firebase_admin.delete_app") as delete_app:
            async with lifespan(app):
                assert app.state.firebase.app is firebase_app
                delete_app.assert_not_called()

        delete_app.assert_called_once_with(firebase_app)
