from typing import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from partnerhub.core import security
from partnerhub.core.config import settings
from partnerhub.core.permissions import Caller, UserRole
from partnerhub.db.session import SessionLocal

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_current_caller(token: str = Depends(reusable_oauth2)) -> Caller:
    try:
        payload = security.decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    user_id = payload.get("sub")
    role = str(payload.get("role") or "").lower()
    if not user_id or role not in {r.value for r in UserRole}:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )
    return Caller(user_id=str(user_id), role=role, organization_id=payload.get("org"))


def get_current_privileged_caller(
    caller: Caller = Depends(get_current_caller),
) -> Caller:
    if not caller.is_privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The caller doesn't have enough privileges",
        )
    return caller
