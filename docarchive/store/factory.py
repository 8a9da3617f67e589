from docarchive.config.settings import Settings
from docarchive.store.base import BaseDocumentStore
from docarchive.store.memory_store import InMemoryDocumentStore
from docarchive.store.postgres_store import PostgresDocumentStore


class DocumentStoreFactory:
    """Creates the configured document store."""

    ADAPTERS: dict[str, type[InMemoryDocumentStore] | type[PostgresDocumentStore]] = {
        "memory": InMemoryDocumentStore,
        "postgres": PostgresDocumentStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStore:
        kind = settings.document_store.lower()
        store_cls = cls.ADAPTERS.get(kind)
        if store_cls is None:
            raise ValueError(
                f"Unknown document store '{kind}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return store_cls(settings.preview_url_prefix)
