# -*- coding: utf-8 -*-
"""
Identity resolution. Users log in through the identity provider, which issues
a signed JWT carrying the user id (`sub`) and role; this module only verifies
it and turns it into an Identity.
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from troop_events.config import Config

ALGORITHM = "HS256"
ROLES = ("public", "helper", "leader", "admin")
STAFF_ROLES = ("leader", "admin")

bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    user_id: Optional[int] = None
    role: str = "public"

    @property
    def is_staff(self):
        return self.role in STAFF_ROLES


ANONYMOUS = Identity()


def create_access_token(user_id: int, role: str, expires_minutes: Optional[int] = None):
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes or Config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, Config.SECRET_KEY, algorithm=ALGORITHM)


def decode_identity(token: str) -> Identity:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials", headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, Config.SECRET_KEY, algorithms=[ALGORITHM])
        sub = payload.get("sub")
        role = payload.get("role")
        if sub is None or role not in ROLES:
            raise credentials_exception
        return Identity(user_id=int(sub), role=role)
    except (JWTError, ValueError):
        raise credentials_exception


# --- dependencies ---

async def get_optional_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Identity:
    """Anonymous callers read as the `public` role."""
    if credentials is None:
        return ANONYMOUS
    return decode_identity(credentials.credentials)


async def get_current_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Identity:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_identity(credentials.credentials)


async def get_leader_or_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_staff:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Restricted to leaders and admins.")
    return identity
