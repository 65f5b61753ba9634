import json
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models.user import User
from .schemas.user import AccessClaims
from .services.auth_service import AuthService
from .core.exception import (
    AuthenticationException,
    BadRequestException,
    ValidationException,
)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_access_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AccessClaims:
    """Verify the bearer token and return its typed claims."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated")
    return AuthService(db).verify_token(credentials.credentials)


async def get_current_user(
    claims: AccessClaims = Depends(get_access_claims),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get current authenticated user.

    Example:
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    user = db.query(User).filter(User.id == claims.sub).first()
    if user is None:
        raise AuthenticationException("Could not validate credentials")
    return user


async def read_payload(
    request: Request, file_field: str
) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """
    Read a body sent either as JSON or as multipart/url-encoded form data.

    Returns the fields as a dict plus the uploaded file under ``file_field``
    if the request carried one. Blank form values are dropped so optional
    fields stay unset.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        data: Dict[str, Any] = {}
        upload: Optional[UploadFile] = None
        for key in form.keys():
            values = form.getlist(key)
            if key == file_field:
                if values and not isinstance(values[0], str) and values[0].filename:
                    upload = values[0]
                continue
            values = [v for v in values if isinstance(v, str) and v != ""]
            if not values:
                continue
            data[key] = values if len(values) > 1 else values[0]
        return data, upload

    body = await request.body()
    if not body:
        return {}, None
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        raise BadRequestException("Request body is not valid JSON")
    if not isinstance(data, dict):
        raise ValidationException("expected a JSON object", field="body")
    return data, None
