"""
Authentication
Tokens are issued by the admin login service; this module only verifies
them and exposes the admin id used for audit fields.
"""
import logging
from datetime import datetime, timedelta, UTC

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from cms_admin.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()


def create_access_token(admin_id: str) -> str:
    """Create a JWT for admin_id (used by tooling and tests)"""
    expire = datetime.now(UTC) + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode = {"sub": str(admin_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode a JWT"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Admin id of the caller"""
    payload = decode_token(credentials.credentials)
    admin_id = payload.get("sub")
    if not admin_id:
        logger.warning("Rejected token without subject")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    return str(admin_id)
