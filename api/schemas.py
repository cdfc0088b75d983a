from typing import Any, Dict, Iterable, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict


class ValidationError(ValueError):
    pass


class UserPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class Envelope(BaseModel):
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    count: Optional[int] = None


def require_fields(payload: Dict[str, Any], required: Iterable[str]) -> Dict[str, str]:
    """Trimmed values for ``required``; raises ValidationError naming every blank one."""
    cleaned: Dict[str, str] = {}
    missing = []
    for key in required:
        value = payload.get(key)
        value = value.strip() if isinstance(value, str) else ""
        if not value:
            missing.append(key)
        cleaned[key] = value
    if missing:
        quoted = ", ".join(f'"{key}"' for key in missing)
        raise ValidationError(f"Validation Error – {quoted} must not be empty.")
    return cleaned


def envelope(
    success: bool,
    status_code: int = 200,
    data: Any = None,
    message: Optional[str] = None,
    count: Optional[int] = None,
) -> JSONResponse:
    body = Envelope(success=success, data=data, message=message, count=count)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
