import json
import os
from typing import Any, Dict, Optional

import firebase_admin
import structlog
from firebase_admin import auth, credentials, firestore_async
from google.cloud.firestore import AsyncClient

from ..config import get_settings

logger = structlog.get_logger(__name__)

settings = get_settings()

_firebase_app = None


def _load_credentials():
    # Check for local file first (Development/Faster)
    if os.path.exists(settings.firebase_service_account_path):
        return credentials.Certificate(settings.firebase_service_account_path)

    # Try Secret Manager, then Application Default Credentials (Cloud Run / Functions)
    try:
        from google.cloud import secretmanager
        client = secretmanager.SecretManagerServiceClient()
        name = f"projects/{settings.firebase_project_id}/secrets/{settings.firebase_secret_name}/versions/latest"
        response = client.access_secret_version(request={"name": name})
        service_account_info = json.loads(response.payload.data.decode("UTF-8"))
        return credentials.Certificate(service_account_info)
    except Exception as e:
        logger.warning("Secret Manager credentials unavailable, using ADC", error=str(e))
        return credentials.ApplicationDefault()


def initialize_firebase():
    global _firebase_app
    if _firebase_app is None:
        try:
            _firebase_app = firebase_admin.initialize_app(_load_credentials(), {
                'projectId': settings.firebase_project_id
            })
            logger.info("Firebase initialized", project_id=settings.firebase_project_id)
        except ValueError:
            # Already initialized elsewhere in this process
            _firebase_app = firebase_admin.get_app()
    return _firebase_app


def get_firestore_client() -> AsyncClient:
    return firestore_async.client(initialize_firebase())


def verify_firebase_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        initialize_firebase()
        return auth.verify_id_token(token)
    except Exception as e:
        logger.warning("Token verification failed", error=str(e))
        return None
