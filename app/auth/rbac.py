from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import AuthContext
from app.core.enums import Capability


def require_capability(*capabilities: Capability):
    """
    Dependency factory to enforce that the requester holds one of the capabilities.

    Example:
        Depends(require_capability(Capability.ADMIN, Capability.HR))
    """

    async def _checker(current_user: AuthContext = Depends(get_current_user)) -> AuthContext:
        if not current_user.capabilities & set(capabilities):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "Forbidden",
                    "message": "Requires one of: " + ", ".join(c.value for c in capabilities),
                },
            )
        return current_user

    return _checker


require_elevated = require_capability(Capability.ADMIN, Capability.HR)
