"""
Configuration management for the storefront payment bridge.

Loads settings from .env via pydantic-settings.

Every key also accepts the bare name used by the first deployment
(``SERVER_KEY``, ``project_id``, ``private_key`` ...), so an existing
.env keeps working.
"""
import logging
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def _env(name: str, legacy: str) -> AliasChoices:
    return AliasChoices(name, legacy)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Firebase service account ────────────────────────────────────
    firebase_type: str = Field("service_account", validation_alias=_env("firebase_type", "type"))
    firebase_project_id: str = Field("", validation_alias=_env("firebase_project_id", "project_id"))
    firebase_private_key_id: str = Field("", validation_alias=_env("firebase_private_key_id", "private_key_id"))
    firebase_private_key: str = Field("", validation_alias=_env("firebase_private_key", "private_key"))
    firebase_client_email: str = Field("", validation_alias=_env("firebase_client_email", "client_email"))
    firebase_client_id: str = Field("", validation_alias=_env("firebase_client_id", "client_id"))
    firebase_auth_uri: str = Field(
        "https://accounts.google.com/o/oauth2/auth",
        validation_alias=_env("firebase_auth_uri", "auth_uri"),
    )
    firebase_token_uri: str = Field(
        "https://oauth2.googleapis.com/token",
        validation_alias=_env("firebase_token_uri", "token_uri"),
    )
    firebase_auth_provider_x509_cert_url: str = Field(
        "https://www.googleapis.com/oauth2/v1/certs",
        validation_alias=_env("firebase_auth_provider_x509_cert_url", "auth_provider_x509_cert_url"),
    )
    firebase_client_x509_cert_url: str = Field(
        "", validation_alias=_env("firebase_client_x509_cert_url", "client_x509_cert_url")
    )
    firebase_database_url: str = Field("", validation_alias=_env("firebase_database_url", "databaseURL"))

    # ── Midtrans Snap ───────────────────────────────────────────────
    midtrans_server_key: str = Field("", validation_alias=_env("midtrans_server_key", "server_key"))
    midtrans_client_key: str = Field("", validation_alias=_env("midtrans_client_key", "client_key"))
    midtrans_is_production: bool = Field(False, validation_alias=_env("midtrans_is_production", "is_production"))

    # ── Order store ─────────────────────────────────────────────────
    order_store_backend: str = "sql"     # "sql" | "firestore"
    orders_collection: str = "orders"
    database_url: str = "sqlite:///./data/storefront.db"
    # None: record orders whenever the SQL store is used, since nothing else
    # writes that table. Firestore orders are created by the storefront.
    record_orders_on_charge: Optional[bool] = None

    # ── Outbound calls ──────────────────────────────────────────────
    upstream_timeout_seconds: Optional[float] = None  # None waits indefinitely

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    port: int = 3000
    cors_origins: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def firebase_credentials(self) -> dict:
        """
        Service-account bundle in the shape ``credentials.Certificate`` expects.

        Private keys pasted into .env usually carry literal ``\\n`` sequences;
        they are turned back into newlines here.
        """
        return {
            "type": self.firebase_type,
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }

    @property
    def firebase_configured(self) -> bool:
        """Whether a usable service-account bundle was supplied."""
        return bool(self.firebase_private_key and self.firebase_client_email)

    @property
    def records_orders_on_charge(self) -> bool:
        if self.record_orders_on_charge is not None:
            return self.record_orders_on_charge
        return self.order_store_backend == "sql"

    @property
    def firebase_options(self) -> dict:
        """Optional app options passed to ``firebase_admin.initialize_app``."""
        options = {}
        if self.firebase_project_id:
            options["projectId"] = self.firebase_project_id
        if self.firebase_database_url:
            options["databaseURL"] = self.firebase_database_url
        return options

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Raises ValueError on a misconfigured
        production deployment, only warns otherwise.
        """
        if self.order_store_backend not in ("sql", "firestore"):
            raise ValueError(
                f"ORDER_STORE_BACKEND must be 'sql' or 'firestore', got '{self.order_store_backend}'"
            )
        if self.order_store_backend == "firestore" and not self.firebase_configured:
            raise ValueError(
                "ORDER_STORE_BACKEND=firestore requires Firebase service-account credentials."
            )

        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.midtrans_server_key:
                raise ValueError("MIDTRANS_SERVER_KEY must be set in production.")
            if not self.midtrans_is_production:
                raise ValueError(
                    "MIDTRANS_IS_PRODUCTION must be true in production. "
                    "Sandbox keys cannot settle real payments."
                )
            if not self.firebase_configured:
                raise ValueError(
                    "Firebase service-account credentials must be set in production."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if not self.midtrans_server_key:
                warnings.append("MIDTRANS_SERVER_KEY not set (token creation will fail)")
            if not self.firebase_configured:
                warnings.append("Firebase credentials not set (identity lookups disabled)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
