from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

PRODUCTS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Wireless Mouse", "price": 25.99, "category": "Electronics"},
    {"id": 2, "name": "Mechanical Keyboard", "price": 79.99, "category": "Electronics"},
    {"id": 3, "name": "USB-C Hub", "price": 34.50, "category": "Accessories"},
    {"id": 4, "name": "Laptop Stand", "price": 45.00, "category": "Accessories"},
    {"id": 5, "name": "Noise-Cancelling Headphones", "price": 199.99, "category": "Audio"},
]

DEFAULT_ROLE = "customer"


@dataclass
class StoreUser:
    id: int
    name: str
    email: str
    role: str = DEFAULT_ROLE

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


def seed_users() -> List[StoreUser]:
    return [
        StoreUser(id=1, name="Alice Johnson", email="alice@example.com", role="admin"),
        StoreUser(id=2, name="Bob Smith", email="bob@example.com"),
        StoreUser(id=3, name="Charlie Lee", email="charlie@example.com"),
    ]


class UserDirectory:
    """In-memory users list; new ids are ``max(id) + 1``."""

    def __init__(self, users: Optional[List[StoreUser]] = None):
        self._users: List[StoreUser] = list(users) if users is not None else seed_users()
        self._lock = threading.Lock()

    def get(self, user_id: int) -> Optional[StoreUser]:
        return next((user for user in self._users if user.id == user_id), None)

    def create(self, name: str, email: str, role: Optional[str] = None) -> StoreUser:
        with self._lock:
            next_id = max((user.id for user in self._users), default=0) + 1
            user = StoreUser(id=next_id, name=name, email=email, role=role or DEFAULT_ROLE)
            self._users.append(user)
        return user


def list_products() -> List[Dict[str, Any]]:
    return [dict(product) for product in PRODUCTS]
