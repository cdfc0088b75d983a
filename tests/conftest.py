import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from adapters.base import NotFound, User, UserStore, parse_int_id


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeDeleteResult:
    def __init__(self, deleted_count: int):
        self.deleted_count = deleted_count


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    def sort(self, keys):
        for key, direction in reversed(keys):
            self.documents.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self.documents if length is None else self.documents[:length]


class FakeCollection:
    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.indexes: List[Any] = []
        self.fail_with: Optional[Exception] = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, keys):
        self.indexes.append(keys)

    async def insert_one(self, document):
        self._check()
        object_id = ObjectId()
        document["_id"] = object_id
        self.documents[object_id] = copy.deepcopy(document)
        return FakeInsertResult(object_id)

    def find(self, query=None):
        self._check()
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents.values()])

    async def find_one(self, query):
        self._check()
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def find_one_and_update(self, query, update, return_document=None):
        self._check()
        document = self.documents.get(query["_id"])
        if document is None:
            return None
        document.update(update["$set"])
        return copy.deepcopy(document)

    async def delete_one(self, query):
        self._check()
        removed = self.documents.pop(query["_id"], None)
        return FakeDeleteResult(1 if removed is not None else 0)


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    async def list_collection_names(self):
        return list(self.collections)

    async def create_collection(self, name):
        self.collections[name] = FakeCollection()

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeAdmin:
    def __init__(self, client):
        self.client = client

    async def command(self, name):
        if self.client.down:
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return {"ok": 1}


class FakeMotorClient:
    def __init__(self):
        self.down = False
        self.closed = False
        self.databases: Dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin(self)

    def __getitem__(self, name):
        return self.databases.setdefault(name, FakeDatabase())

    def users(self, dbname: str = "multi_db_crud") -> FakeCollection:
        return self[dbname]["users"]

    def close(self):
        self.closed = True


class MemoryUserStore(UserStore):
    """In-process stand-in for the relational store."""

    engine = "mysql"
    label = "MySQL"

    def __init__(self, source_config=None):
        super().__init__(source_config)
        self.rows: Dict[int, User] = {}
        self._next_id = 1

    async def init(self) -> bool:
        self._ready = True
        return True

    async def close(self) -> None:
        self._ready = False

    async def create(self, fields):
        self._require_ready()
        now = datetime.now(timezone.utc)
        user = User(id=self._next_id, created_at=now, updated_at=now, **fields)
        self.rows[user.id] = user
        self._next_id += 1
        return user

    async def list_all(self):
        self._require_ready()
        return sorted(self.rows.values(), key=lambda user: user.id, reverse=True)

    async def get_by_id(self, user_id):
        self._require_ready()
        user = self.rows.get(parse_int_id(user_id))
        if user is None:
            raise NotFound("User not found")
        return user

    async def update(self, user_id, fields):
        user = await self.get_by_id(user_id)
        updated = user.model_copy(update={**fields, "updated_at": datetime.now(timezone.utc)})
        self.rows[updated.id] = updated
        return updated

    async def delete_by_id(self, user_id):
        self._require_ready()
        if self.rows.pop(parse_int_id(user_id), None) is None:
            raise NotFound("User not found")


@pytest.fixture
def fake_mongo(monkeypatch):
    client = FakeMotorClient()
    monkeypatch.setattr("adapters.mongo.MongoUserStore._make_client", lambda self, params: client)
    return client


@pytest.fixture
def memory_store():
    return MemoryUserStore()
