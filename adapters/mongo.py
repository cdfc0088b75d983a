from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, PyMongoError

from adapters.base import BackendUnavailable, NotFound, StoreError, User, UserStore
from utils.config import load_environments

logger = logging.getLogger(__name__)

COLLECTION_NAME = "users"


def _document_to_user(document: Dict[str, Any]) -> User:
    return User(
        id=str(document["_id"]),
        name=document.get("name", ""),
        email=document.get("email", ""),
        phone=document.get("phone", ""),
        created_at=document.get("createdAt"),
        updated_at=document.get("updatedAt"),
    )


def _object_id(user_id: Any) -> ObjectId:
    try:
        return ObjectId(str(user_id))
    except (InvalidId, TypeError) as exc:
        raise NotFound("User not found") from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoUserStore(UserStore):
    """Document store. The server may legitimately be absent at startup."""

    engine = "mongo"
    label = "MongoDB"

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        super().__init__(source_config)
        self._client: Optional[AsyncIOMotorClient] = None
        self._collection: Optional[AsyncIOMotorCollection] = None

    def unavailable_message(self) -> str:
        return "MongoDB is not running. Please install & start MongoDB, then restart the server."

    def _db_params(self) -> Dict[str, Any]:
        load_environments()
        uri = self.source_config.get("uri") or os.getenv("MONGO_URI") or "mongodb://localhost:27017"
        dbname = self.source_config.get("dbname") or os.getenv("MONGO_DB_NAME") or "multi_db_crud"
        timeout_raw = self.source_config.get("timeout_ms") or os.getenv("MONGO_TIMEOUT_MS", "5000")
        return {"uri": uri, "dbname": dbname, "timeout_ms": int(timeout_raw)}

    def _make_client(self, params: Dict[str, Any]) -> AsyncIOMotorClient:
        return AsyncIOMotorClient(
            params["uri"],
            serverSelectionTimeoutMS=params["timeout_ms"],
            tz_aware=True,
        )

    async def init(self) -> bool:
        if self._ready:
            return True
        params = self._db_params()
        client = self._make_client(params)
        try:
            await client.admin.command("ping")
            database = client[params["dbname"]]
            if COLLECTION_NAME not in await database.list_collection_names():
                await database.create_collection(COLLECTION_NAME)
            collection = database[COLLECTION_NAME]
            await collection.create_index([("createdAt", DESCENDING)])
        except PyMongoError as exc:
            logger.warning("MongoDB not available, skipping (%s)", exc)
            client.close()
            self._ready = False
            return False
        self._client = client
        self._collection = collection
        self._ready = True
        logger.info("MongoDB connected (%s)", params["dbname"])
        return True

    async def close(self) -> None:
        client, self._client = self._client, None
        self._collection = None
        self._ready = False
        if client is not None:
            client.close()
            logger.info("MongoDB client closed")

    def _wrap(self, exc: PyMongoError) -> Exception:
        if isinstance(exc, ConnectionFailure):
            return BackendUnavailable(self.unavailable_message())
        return StoreError(str(exc))

    async def create(self, fields: Dict[str, str]) -> User:
        self._require_ready()
        now = _now()
        document = {
            "name": fields["name"],
            "email": fields["email"],
            "phone": fields["phone"],
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self._collection.insert_one(document)
        except PyMongoError as exc:
            raise self._wrap(exc) from exc
        document["_id"] = result.inserted_id
        return _document_to_user(document)

    async def list_all(self) -> List[User]:
        self._require_ready()
        try:
            cursor = self._collection.find().sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            documents = await cursor.to_list(length=None)
        except PyMongoError as exc:
            raise self._wrap(exc) from exc
        return [_document_to_user(doc) for doc in documents]

    async def get_by_id(self, user_id: str) -> User:
        self._require_ready()
        object_id = _object_id(user_id)
        try:
            document = await self._collection.find_one({"_id": object_id})
        except PyMongoError as exc:
            raise self._wrap(exc) from exc
        if document is None:
            raise NotFound("User not found")
        return _document_to_user(document)

    async def update(self, user_id: str, fields: Dict[str, str]) -> User:
        self._require_ready()
        object_id = _object_id(user_id)
        try:
            document = await self._collection.find_one_and_update(
                {"_id": object_id},
                {
                    "$set": {
                        "name": fields["name"],
                        "email": fields["email"],
                        "phone": fields["phone"],
                        "updatedAt": _now(),
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise self._wrap(exc) from exc
        if document is None:
            raise NotFound("User not found")
        return _document_to_user(document)

    async def delete_by_id(self, user_id: str) -> None:
        self._require_ready()
        object_id = _object_id(user_id)
        try:
            result = await self._collection.delete_one({"_id": object_id})
        except PyMongoError as exc:
            raise self._wrap(exc) from exc
        if result.deleted_count == 0:
            raise NotFound("User not found")
