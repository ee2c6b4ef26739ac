"""
Identity service: email-verification lookups against Firebase Authentication.
"""
import asyncio
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth, exceptions as firebase_exceptions

from domain.errors import IdentityLookupError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


class IdentityService:
    """Reads user records from the identity provider. No side effects."""

    def __init__(self, app: firebase_admin.App, timeout: Optional[float] = None):
        self._app = app
        self._timeout = timeout

    async def get_email_verified(self, uid: str) -> bool:
        """
        Return the provider's email-verification flag for ``uid``.

        Raises:
            IdentityLookupError: unknown or malformed uid, provider failure, timeout
        """
        if not uid:
            raise IdentityLookupError("User id must be a non-empty string")

        try:
            user = await run_blocking(auth.get_user, uid, app=self._app, timeout=self._timeout)
        except auth.UserNotFoundError as e:
            logger.info(f"Identity lookup: no user for uid {uid[:8]}...")
            raise IdentityLookupError(str(e))
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            logger.warning(f"Identity lookup failed for uid {uid[:8]}...: {e}")
            raise IdentityLookupError(str(e))
        except asyncio.TimeoutError:
            logger.error(f"Identity lookup timed out after {self._timeout}s")
            raise IdentityLookupError("Identity provider timed out")

        return bool(user.email_verified)
