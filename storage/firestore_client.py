from __future__ import annotations

from google.cloud import firestore
from config.settings import settings


def get_firestore_client() -> firestore.Client:
    # Only reindex and the health probe read the store; reactors get documents from the event.
    if settings.FIRESTORE_PROJECT_ID:
        return firestore.Client(project=settings.FIRESTORE_PROJECT_ID)
    return firestore.Client()
