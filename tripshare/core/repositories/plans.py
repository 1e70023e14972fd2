"""
Plan repository for Firestore.

Reads plan documents and applies the membership, invite token and
``memberIds`` writes used by the callable handlers. Every mutation refreshes
``updatedAt`` with the server timestamp.
"""

import logging
from typing import Dict, Iterator, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from tripshare import config
from tripshare.core.firebase_client import get_firestore_client
from tripshare.core.plans.membership import merge_member_ids
from tripshare.core.plans.models import MemberRole, Plan
from tripshare.core.repositories.exceptions import PlanDataMissingError
from tripshare.core.security import hash_token

logger = logging.getLogger(__name__)


class PlanRepository:
    """
    Repository for plan documents.

    The Firestore client is injectable; when omitted the process-wide client
    from ``firebase_client`` is used on first access.
    """

    def __init__(self, db: Optional[firestore.Client] = None, collection_name: Optional[str] = None):
        self._db = db
        self.collection_name = collection_name or config.PLANS_COLLECTION

    @property
    def db(self) -> firestore.Client:
        if self._db is None:
            self._db = get_firestore_client()
        return self._db

    @property
    def collection(self) -> firestore.CollectionReference:
        return self.db.collection(self.collection_name)

    def get(self, plan_id: str) -> Optional[Plan]:
        """
        Get a plan by ID.

        Returns:
            Plan if found, None otherwise

        Raises:
            PlanDataMissingError: If the document exists without a body
        """
        snapshot = self.collection.document(plan_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict()
        if data is None:
            raise PlanDataMissingError(plan_id)
        return Plan.from_firestore_dict(snapshot.id, data)

    def find_by_invite_token(self, token: str) -> Optional[Plan]:
        """
        Find the plan currently holding ``token``.

        Tokens are assumed unique but this is not enforced anywhere. When more
        than one plan matches, the first result is used and a warning logged.
        """
        query = self.collection.where(filter=FieldFilter("inviteToken", "==", token)).limit(2)
        snapshots = list(query.stream())
        if not snapshots:
            return None
        if len(snapshots) > 1:
            logger.warning(
                "Invite token %s matches multiple plans; using %s",
                hash_token(token),
                snapshots[0].id,
            )
        first = snapshots[0]
        return Plan.from_firestore_dict(first.id, first.to_dict() or {})

    def iter_plans(self) -> Iterator[Plan]:
        """Stream every plan in the collection."""
        for snapshot in self.collection.stream():
            yield Plan.from_firestore_dict(snapshot.id, snapshot.to_dict() or {})

    def batch(self) -> firestore.WriteBatch:
        return self.db.batch()

    def add_member(
        self,
        plan: Plan,
        uid: str,
        role: MemberRole = MemberRole.EDITOR,
        batch: Optional[firestore.WriteBatch] = None,
    ) -> List[str]:
        """
        Add ``uid`` to the plan's membership in a single document update.

        ``memberIds`` is recomputed from the list read with ``plan``; there is
        no transaction around the read and this write. With ``batch`` the
        update is queued there and the caller commits it.

        Returns:
            The ``memberIds`` list that was written
        """
        member_ids = merge_member_ids(plan.member_ids, uid)
        fields = {
            firestore.Client.field_path("members", uid): {
                "role": role.value,
                "joinedAt": firestore.SERVER_TIMESTAMP,
            },
            "memberIds": member_ids,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        doc_ref = self.collection.document(plan.id)
        if batch is not None:
            batch.update(doc_ref, fields)
        else:
            doc_ref.update(fields)
        logger.info("Added %s to plan %s as %s", uid, plan.id, role.value)
        return member_ids

    def set_invite_token(self, plan_id: str, token: str) -> None:
        self.collection.document(plan_id).update({
            "inviteToken": token,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        })
        logger.info("Stored invite token %s on plan %s", hash_token(token), plan_id)

    def update_member_ids(self, plan_id: str, member_ids: List[str]) -> None:
        self.collection.document(plan_id).update({
            "memberIds": member_ids,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        })

    def batch_update_member_ids(self, updates: Dict[str, List[str]]) -> None:
        """Write ``memberIds`` for several plans in one atomic batch."""
        if not updates:
            return
        batch = self.batch()
        for plan_id, member_ids in updates.items():
            batch.update(self.collection.document(plan_id), {
                "memberIds": member_ids,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        batch.commit()
        logger.info("Committed memberIds batch for %d plans", len(updates))
