"""
User mirror repository for Firestore.
"""

import logging
from typing import Optional

from google.cloud import firestore

from tripshare import config
from tripshare.core.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for the per-user mirror documents (``users/<uid>``)."""

    def __init__(self, db: Optional[firestore.Client] = None, collection_name: Optional[str] = None):
        self._db = db
        self.collection_name = collection_name or config.USERS_COLLECTION

    @property
    def db(self) -> firestore.Client:
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    def set_active_plan(self, uid: str, plan_id: str, batch: Optional[firestore.WriteBatch] = None) -> None:
        """Point the user's ``activePlanId`` at ``plan_id``, keeping other fields."""
        doc_ref = self.db.collection(self.collection_name).document(uid)
        fields = {
            "activePlanId": plan_id,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        if batch is not None:
            batch.set(doc_ref, fields, merge=True)
        else:
            doc_ref.set(fields, merge=True)
        logger.debug("Set active plan for %s to %s", uid, plan_id)
