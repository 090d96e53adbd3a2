"""Best-effort persistence of finished analyses in MongoDB.

The store is connected once at startup. If the connection fails the service
keeps running: history reads come back empty, saves and deletes raise
``StoreError``.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import AsyncMongoClient, DESCENDING
from pymongo.errors import PyMongoError

from newsanalyzer.schemas import AnalysisResult, StoredRecord


class StoreError(Exception):
    pass


class StoreState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class HistoryStore:
    def __init__(self, collection: Any = None, client: Optional[AsyncMongoClient] = None):
        self._collection = collection
        self._client = client

    @property
    def state(self) -> StoreState:
        return StoreState.CONNECTED if self._collection is not None else StoreState.DISCONNECTED

    @classmethod
    async def connect(
        cls, uri: Optional[str], db_name: str = "newsanalyzer", collection_name: str = "news"
    ) -> "HistoryStore":
        if not uri:
            logging.warning("MONGODB_URI is not set. Running without MongoDB - history will be unavailable")
            return cls()

        client = None
        try:
            client = AsyncMongoClient(
                uri,
                serverSelectionTimeoutMS=5000,
                socketTimeoutMS=45000,
                tz_aware=True,
            )
            await client.admin.command("ping")
            db = client.get_default_database(default=db_name)
            logging.info(f"✅ Connected to MongoDB successfully (db={db.name}, collection={collection_name})")
            return cls(db[collection_name], client)
        except (PyMongoError, ValueError) as e:
            logging.error(f"MongoDB connection error: {e}")
            logging.warning("Running server without MongoDB - some features will be limited")
            if client is not None:
                await client.close()
            return cls()

    async def close(self):
        if self._client is not None:
            await self._client.close()
        self._client = None
        self._collection = None

    def _require_collection(self):
        if self._collection is None:
            raise StoreError("Database is not connected")
        return self._collection

    async def save(self, title: str, content: str, result: AnalysisResult) -> str:
        collection = self._require_collection()
        doc = {
            "title": title,
            "content": content,
            **result.model_dump(by_alias=True),
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            inserted = await collection.insert_one(doc)
        except PyMongoError as e:
            raise StoreError(f"Failed to save analysis: {e}") from e
        return str(inserted.inserted_id)

    async def list_recent(self, limit: int = 10) -> List[StoredRecord]:
        if self._collection is None:
            return []
        try:
            cursor = self._collection.find().sort("createdAt", DESCENDING).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logging.error(f"Failed to load history: {e}")
            return []

        records = []
        for doc in docs:
            doc["_id"] = str(doc["_id"])
            try:
                records.append(StoredRecord.model_validate(doc))
            except ValueError as e:
                logging.warning(f"Skipping malformed history record {doc['_id']}: {e}")
        return records

    async def delete_by_id(self, record_id: str) -> bool:
        collection = self._require_collection()
        try:
            oid = ObjectId(record_id)
        except (InvalidId, TypeError):
            return False
        try:
            deleted = await collection.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            raise StoreError(f"Failed to delete record {record_id}: {e}") from e
        return deleted is not None
