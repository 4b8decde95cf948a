"""Wiring of settings into stores, providers and the notifier."""

import logging
from typing import Any, Optional

from config.secrets import ReviewConfig, SecretAccessor
from config.settings import NotifierSettings
from notifications.email_provider import EmailProvider, create_email_provider

from .document_store import DocumentStore
from .trigger import ProviderFactory, SubmissionNotifier

logger = logging.getLogger(__name__)


def create_document_store(settings: NotifierSettings, firestore_client: Any = None) -> DocumentStore:
    """
    Build the configured document store.

    Args:
        settings: Notifier settings
        firestore_client: Existing Firestore client (firestore backend only)
    """
    if settings.store_backend == "sqlite":
        from .sqlite_store import SQLiteDocumentStore
        logger.info(f"Document store: SQLite ({settings.sqlite_path})")
        return SQLiteDocumentStore(settings.sqlite_path)

    from .firestore_store import FirestoreDocumentStore
    if firestore_client is None:
        from google.cloud import firestore
        if settings.firestore_database:
            firestore_client = firestore.Client(database=settings.firestore_database)
        else:
            firestore_client = firestore.Client()
    return FirestoreDocumentStore(firestore_client)


def build_provider_factory(settings: NotifierSettings) -> ProviderFactory:
    """Provider factory bound to settings; the API key comes per invocation."""

    def factory(config: ReviewConfig) -> EmailProvider:
        return create_email_provider(
            settings.email_provider,
            config.api_key,
            api_url=settings.resend_api_url,
            timeout=settings.provider_timeout,
        )

    return factory


def build_notifier(
    settings: NotifierSettings,
    secrets: SecretAccessor,
    store: Optional[DocumentStore] = None,
    firestore_client: Any = None,
) -> SubmissionNotifier:
    """Assemble a SubmissionNotifier from settings."""
    return SubmissionNotifier(
        store=store or create_document_store(settings, firestore_client),
        secrets=secrets,
        provider_factory=build_provider_factory(settings),
        secret_names=settings.secret_names,
        receipts_collection=settings.receipts_collection,
    )
