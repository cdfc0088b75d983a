from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from adapters.base import USER_FIELDS, AdapterError, BackendUnavailable, NotFound, UserStore
from api.schemas import UserPayload, ValidationError, envelope, require_fields


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=str(exc) or "User not found")
    if isinstance(exc, BackendUnavailable):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def build_user_router(store: UserStore) -> APIRouter:
    """Five-operation users resource bound to one store."""

    def require_ready() -> None:
        if not store.is_ready():
            raise HTTPException(status_code=503, detail=store.unavailable_message())

    router = APIRouter(tags=[store.engine], dependencies=[Depends(require_ready)])

    @router.post("/users", status_code=201)
    async def create_user(payload: UserPayload) -> JSONResponse:
        try:
            fields = require_fields(payload.model_dump(), USER_FIELDS)
            user = await store.create(fields)
        except (ValidationError, AdapterError) as exc:
            raise _http_error(exc) from exc
        return envelope(True, status_code=201, data=user.to_payload())

    @router.get("/users")
    async def list_users() -> JSONResponse:
        try:
            users = await store.list_all()
        except AdapterError as exc:
            raise _http_error(exc) from exc
        return envelope(True, data=[user.to_payload() for user in users], count=len(users))

    @router.get("/users/{user_id}")
    async def get_user(user_id: str) -> JSONResponse:
        try:
            user = await store.get_by_id(user_id)
        except AdapterError as exc:
            raise _http_error(exc) from exc
        return envelope(True, data=user.to_payload())

    @router.put("/users/{user_id}")
    async def update_user(user_id: str, payload: UserPayload) -> JSONResponse:
        try:
            fields = require_fields(payload.model_dump(), USER_FIELDS)
            user = await store.update(user_id, fields)
        except (ValidationError, AdapterError) as exc:
            raise _http_error(exc) from exc
        return envelope(True, data=user.to_payload())

    @router.delete("/users/{user_id}")
    async def delete_user(user_id: str) -> JSONResponse:
        try:
            await store.delete_by_id(user_id)
        except AdapterError as exc:
            raise _http_error(exc) from exc
        return envelope(True, message="User deleted successfully")

    return router
