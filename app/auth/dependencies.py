import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import AuthContext
from app.auth.security import decode_access_token
from app.core.enums import Role
from app.core.exceptions import StoreUnavailable
from app.core.models import Employee
from app.db.session import CONNECTION_ERRORS, get_db


logger = logging.getLogger(__name__)


# Tokens are issued by the identity service; this backend only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Resolve the authenticated employee and their capabilities from the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "Unauthorized", "message": "Could not validate credentials"},
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    user_id_str = payload.get("userId") or payload.get("sub")
    if not user_id_str:
        raise credentials_exception

    try:
        user_id = UUID(str(user_id_str))
    except ValueError:
        raise credentials_exception

    try:
        result = await db.execute(select(Employee).where(Employee.id == user_id))
    except CONNECTION_ERRORS as e:
        logger.error("Database unavailable during authentication: %s", e)
        unavailable = StoreUnavailable()
        raise HTTPException(status_code=unavailable.status_code, detail=unavailable.to_detail()) from e
    employee = result.scalar_one_or_none()
    if not employee or not employee.is_active:
        raise credentials_exception

    try:
        role = Role(employee.role)
    except ValueError:
        raise credentials_exception

    return AuthContext.for_role(employee.id, role)
