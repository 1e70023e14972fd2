import os
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore
from fastapi import Header

from tripshare import config
from tripshare.config import logger
from tripshare.errors import unauthenticated

_firebase_app: Optional[firebase_admin.App] = None
_db: Optional[firestore.Client] = None

CLOCK_SKEW_SECONDS = 60


def _resolve_credentials_path(credentials_path: str) -> str:
    if os.path.isabs(credentials_path):
        return credentials_path

    possible_paths = [
        os.path.join(str(config.PROJECT_ROOT), credentials_path),
        os.path.join(str(config.PROJECT_ROOT), os.path.basename(credentials_path)),
        credentials_path,
    ]
    for path in possible_paths:
        if os.path.exists(path):
            logger.debug("Found Firebase credentials at: %s", path)
            return os.path.abspath(path)
    raise FileNotFoundError(
        f"Firebase credentials file not found. Tried: {', '.join(possible_paths)}. "
        f"Set FIREBASE_CREDENTIALS_PATH to an absolute path or ensure the file exists."
    )


def init_firebase() -> None:
    global _firebase_app, _db
    if _firebase_app is not None and _db is not None:
        return

    options: Dict[str, Any] = {}
    if config.FIREBASE_PROJECT_ID:
        options["projectId"] = config.FIREBASE_PROJECT_ID

    if config.FIREBASE_CREDENTIALS_PATH:
        credentials_path = _resolve_credentials_path(config.FIREBASE_CREDENTIALS_PATH)
        if not os.path.exists(credentials_path):
            raise FileNotFoundError(f"Firebase credentials file not found at: {credentials_path}")
        cred = credentials.Certificate(credentials_path)
    else:
        # Cloud Run / Functions runtime or `gcloud auth application-default login`
        cred = credentials.ApplicationDefault()

    _firebase_app = firebase_admin.initialize_app(cred, options or None)
    _db = firestore.client()
    logger.info("Firebase initialized for project %s", config.FIREBASE_PROJECT_ID or "<default>")


def get_firestore_client() -> firestore.Client:
    if _db is None:
        init_firebase()
    assert _db is not None
    return _db


def verify_id_token(id_token: str) -> Dict[str, Any]:
    init_firebase()
    try:
        # firebase_admin rejects skew values above 60 seconds
        return auth.verify_id_token(id_token, clock_skew_seconds=CLOCK_SKEW_SECONDS)
    except Exception as exc:
        logger.warning("Failed to verify Firebase ID token: %s", exc)
        raise


async def get_optional_caller(authorization: Optional[str] = Header(None)) -> Optional[Dict[str, Any]]:
    """
    Resolve the calling identity from a Firebase ID token.

    Returns None when the request carries no Authorization header, so each
    handler decides how to reject anonymous calls. A header that is present
    but does not verify is rejected here.
    """
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise unauthenticated()
    token = authorization.split(" ", 1)[1].strip()
    try:
        decoded = verify_id_token(token)
    except Exception:
        raise unauthenticated()
    uid = decoded.get("uid")
    if not uid:
        raise unauthenticated()
    return {"uid": uid, "email": decoded.get("email"), "claims": decoded}
