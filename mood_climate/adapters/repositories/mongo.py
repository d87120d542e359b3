"""
MongoDB persistence for application state.

Mirrors JsonStateStore: the mood journal and the last resolved location are
two independent documents in the `app_state` collection.
"""

import logging
from typing import Any, Dict, List, Optional

import certifi
import pymongo
from pymongo import MongoClient
from pymongo.errors import OperationFailure, PyMongoError, ServerSelectionTimeoutError

from mood_climate.adapters.repositories.state_store import StorageConnectionError, StorageError

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_DATABASE_NAME = "mood_climate"
STATE_COLLECTION_NAME = "app_state"

ENTRIES_DOCUMENT_ID = "mood_entries"
LOCATION_DOCUMENT_ID = "location_data"

CONNECTION_TIMEOUT_MS = 10000


# ============================================================================
# DATABASE CONNECTION
# ============================================================================

class DatabaseConfig:
    """Encapsulates MongoDB connection configuration."""

    def __init__(self, uri: str, database_name: str = DEFAULT_DATABASE_NAME):
        if not uri:
            raise ValueError("MongoDB URI not provided")
        self.uri = uri
        self.database_name = database_name

    def get_client(self) -> MongoClient:
        """
        Creates a MongoDB client with secure SSL/TLS configuration.

        Raises:
            StorageConnectionError: If connection fails.
        """
        try:
            client = MongoClient(
                self.uri,
                tlsCAFile=certifi.where(),
                serverSelectionTimeoutMS=CONNECTION_TIMEOUT_MS,
                connectTimeoutMS=CONNECTION_TIMEOUT_MS
            )
            client.admin.command('ping')
            logger.info("[OK] MongoDB connected successfully")
            return client

        except ServerSelectionTimeoutError:
            logger.error("MongoDB connection timeout")
            raise StorageConnectionError("Connection timeout") from None
        except OperationFailure as e:
            logger.error(f"MongoDB authentication failed: {e}")
            raise StorageConnectionError(f"Authentication failed: {e}") from None
        except Exception as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise StorageConnectionError(str(e)) from e

    def get_database(self) -> pymongo.database.Database:
        return self.get_client()[self.database_name]


# ============================================================================
# STATE STORE
# ============================================================================

class MongoStateStore:
    """Stores each state record as one document."""

    def __init__(self, collection: pymongo.collection.Collection):
        self.collection = collection

    @classmethod
    def from_uri(cls, uri: str, database_name: str = DEFAULT_DATABASE_NAME) -> "MongoStateStore":
        db = DatabaseConfig(uri, database_name).get_database()
        return cls(db[STATE_COLLECTION_NAME])

    def _find(self, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.collection.find_one({"_id": document_id})
        except PyMongoError as e:
            logger.error(f"Failed to read {document_id}: {e}")
            raise StorageError(f"Read failed for {document_id}: {e}") from e

    def _replace(self, document: Dict[str, Any]) -> None:
        try:
            self.collection.replace_one({"_id": document["_id"]}, document, upsert=True)
        except PyMongoError as e:
            logger.error(f"Failed to save {document['_id']}: {e}")
            raise StorageError(f"Save failed for {document['_id']}: {e}") from e

    def load_entries(self) -> List[Dict[str, Any]]:
        document = self._find(ENTRIES_DOCUMENT_ID)
        if not document:
            return []
        return list(document.get("entries", []))

    def save_entries(self, entries: List[Dict[str, Any]]) -> None:
        self._replace({"_id": ENTRIES_DOCUMENT_ID, "entries": entries})
        logger.info(f"[OK] Saved {len(entries)} mood entries")

    def load_location(self) -> Optional[Dict[str, Any]]:
        document = self._find(LOCATION_DOCUMENT_ID)
        if not document:
            return None
        return document.get("data")

    def save_location(self, location: Dict[str, Any]) -> None:
        self._replace({"_id": LOCATION_DOCUMENT_ID, "data": location})
        logger.info("[OK] Saved location data")
