from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

USER_FIELDS = ("name", "email", "phone")


class AdapterError(RuntimeError):
    pass


class StoreError(AdapterError):
    pass


class NotFound(AdapterError):
    pass


class BackendUnavailable(AdapterError):
    pass


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    name: str
    email: str
    phone: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UserStore(ABC):
    """One backing store holding the ``users`` table/collection.

    Subclasses own a single long-lived connection, pool or client, opened by
    :meth:`init` and released by :meth:`close`. Every CRUD operation checks
    :meth:`is_ready` first and raises :class:`BackendUnavailable` when the
    store never came up.
    """

    engine: str = "unknown"
    label: str = "Store"

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        self.source_config = source_config or {}
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    def _require_ready(self) -> None:
        if not self.is_ready():
            raise BackendUnavailable(self.unavailable_message())

    def unavailable_message(self) -> str:
        return f"{self.label} is not available. Check the connection settings, then restart the server."

    @abstractmethod
    async def init(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create(self, fields: Dict[str, str]) -> User:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, fields: Dict[str, str]) -> User:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_id(self, user_id: str) -> None:
        raise NotImplementedError


def parse_int_id(user_id: Any) -> int:
    """Integer primary key for the SQL stores; anything else cannot match a row."""
    try:
        value = int(str(user_id).strip())
    except (TypeError, ValueError) as exc:
        raise NotFound("User not found") from exc
    if value <= 0:
        raise NotFound("User not found")
    return value
