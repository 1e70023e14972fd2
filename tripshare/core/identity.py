"""
Identity provider adapter.

Resolves invitee email addresses to Firebase Authentication user ids.
"""

from typing import Optional

from firebase_admin import auth

from tripshare.config import logger
from tripshare.core.firebase_client import init_firebase
from tripshare.core.security import mask_email


class IdentityProvider:
    """Thin wrapper over ``firebase_admin.auth`` user lookups."""

    def get_uid_by_email(self, email: str) -> Optional[str]:
        """
        Look up a user id by email.

        Returns:
            The uid, or None when no account uses this email

        Raises:
            Any other Firebase Auth error (surfaced as INTERNAL by callers)
        """
        init_firebase()
        try:
            user = auth.get_user_by_email(email)
        except auth.UserNotFoundError:
            logger.info("No user found for email %s", mask_email(email))
            return None
        except ValueError:
            # Malformed email address
            logger.info("Rejected malformed email %s", mask_email(email))
            return None
        return user.uid
