"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import firestore

from backend.config import get_settings
from backend.db import DbClient, FirestoreDbClient, InMemoryDbClient, PostgresDbClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None


def get_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once and return it."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        settings = get_settings()
        options = (
            {"projectId": settings.firebase_project_id}
            if settings.firebase_project_id
            else None
        )
        return firebase_admin.initialize_app(options=options)


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not (
        settings.database_url or settings.firebase_project_id
    ):
        logger.info("Using in-memory document store")
        _db_client = InMemoryDbClient()
    elif settings.database_url:
        _db_client = PostgresDbClient(settings.database_url)
    else:
        _db_client = FirestoreDbClient(firestore.client(app=get_firebase_app()))
    return _db_client
