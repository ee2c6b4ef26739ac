"""
Firebase Admin client for identity lookups and the Firestore order store.

One ``FirebaseClient`` is created per process in the application lifespan
and handed to request handlers through ``app.state``.
"""
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

from config import Settings

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "[DEFAULT]"


class FirebaseClient:
    """Owns the firebase_admin App built from the service-account settings."""

    def __init__(self, settings: Settings, name: str = DEFAULT_APP_NAME):
        self._settings = settings
        self._name = name
        self._app: Optional[firebase_admin.App] = None

    def initialize(self) -> firebase_admin.App:
        """Build the firebase_admin App. Called once on server startup."""
        try:
            cred = credentials.Certificate(self._settings.firebase_credentials)
            self._app = firebase_admin.initialize_app(
                cred,
                options=self._settings.firebase_options or None,
                name=self._name,
            )
            logger.info(f"Firebase app initialized for project '{self._settings.firebase_project_id}'")
        except Exception as e:
            logger.error(f"Failed to initialize Firebase app: {e}")
            raise
        return self._app

    @property
    def app(self) -> firebase_admin.App:
        """Get the firebase_admin App instance."""
        if self._app is None:
            raise RuntimeError("FirebaseClient.initialize() must run before use")
        return self._app

    def firestore(self):
        """Firestore client bound to this app."""
        return firestore.client(app=self.app)

    def close(self) -> None:
        """Delete the App on shutdown."""
        if self._app is not None:
            firebase_admin.delete_app(self._app)
            self._app = None
            logger.info("Firebase app deleted")
