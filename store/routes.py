import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from api.schemas import ValidationError, envelope, require_fields
from store.catalog import UserDirectory, list_products

logger = logging.getLogger(__name__)


class StoreUserPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


def require_token(authorization: Optional[str] = Header(default=None)) -> str:
    # presence only; the value is never verified
    if authorization:
        logger.info("[AUTH] Token received, access granted")
        return authorization
    logger.info("[AUTH] No token provided, access denied")
    raise HTTPException(
        status_code=401,
        detail="Unauthorized – Please provide a valid token in the Authorization header.",
    )


def get_directory(request: Request) -> UserDirectory:
    return request.app.state.users


products_router = APIRouter(prefix="/products", tags=["products"])
users_router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_token)])


@products_router.get("")
def get_all_products() -> JSONResponse:
    products = list_products()
    return envelope(True, data=products, count=len(products))


@users_router.get("/{user_id}")
def get_user_by_id(user_id: str, directory: UserDirectory = Depends(get_directory)) -> JSONResponse:
    try:
        user = directory.get(int(user_id))
    except ValueError:
        user = None
    if user is None:
        raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found.")
    return envelope(True, data=user.to_payload())


@users_router.post("", status_code=201)
def create_user(payload: StoreUserPayload, directory: UserDirectory = Depends(get_directory)) -> JSONResponse:
    try:
        fields = require_fields(payload.model_dump(), ("name", "email"))
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail='Validation Error – "name" and "email" are required fields.',
        ) from exc
    user = directory.create(fields["name"], fields["email"], role=(payload.role or "").strip() or None)
    return envelope(True, status_code=201, data=user.to_payload(), message="User created successfully.")


@users_router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
@users_router.api_route("/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def users_route_not_found() -> None:
    # unmatched /users paths still sit behind the token check
    raise HTTPException(status_code=404)
