from datetime import timedelta
from typing import Any, Dict, Optional, Union
from jose import jwt
from partnerhub.core.config import settings
from partnerhub.utils.timezone import now_utc

# Export the algorithm constant for use in other modules
ALGORITHM = settings.ALGORITHM


def create_access_token(
    subject: Union[str, Any],
    role: str,
    organization_id: Optional[str] = None,
    expires_delta: timedelta = None,
) -> str:
    """Issue a bearer token carrying the caller identity (sub, role, org).

    Login lives outside this service; tokens are minted here for sibling services and tests.
    """
    if expires_delta:
        expire = now_utc() + expires_delta
    else:
        expire = now_utc() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(subject), "role": role}
    if organization_id:
        to_encode["org"] = str(organization_id)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a bearer token. Raises jose.JWTError when invalid or expired."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
