"""Auth API: login, logout, session check endpoints."""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from jose import JWTError, jwt

from homework_planner.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from homework_planner.domain.assignment.models import Identity
from homework_planner.persistence.db import get_connection

router = APIRouter(prefix="/auth", tags=["auth"])

_bearer = HTTPBearer(auto_error=False)


# ------------------------------------------------------------------
# Password checking (Direct bcrypt to avoid passlib compatibility issues)
# ------------------------------------------------------------------
def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: str
    password: str


# ------------------------------------------------------------------
# JWT helpers
# ------------------------------------------------------------------
def create_token(identity: Identity) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": identity.email,
        "name": identity.name,
        "is_admin": identity.is_admin,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def _decode_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")
    if not payload.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: no subject")
    return Identity(
        email=payload["sub"],
        name=payload.get("name") or payload["sub"],
        is_admin=bool(payload.get("is_admin", False)),
    )


# ------------------------------------------------------------------
# Dependency: get current identity from Bearer token
# ------------------------------------------------------------------
def get_current_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Identity:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in. Please log in again.")
    return _decode_token(credentials.credentials)


def optional_current_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Optional[Identity]:
    if not credentials:
        return None
    try:
        return _decode_token(credentials.credentials)
    except HTTPException:
        return None


# ------------------------------------------------------------------
# DB helpers
# ------------------------------------------------------------------
def _get_user_by_email(email: str) -> Optional[dict]:
    conn = get_connection()
    row = conn.execute("SELECT * FROM users WHERE email = ?", (email.strip(),)).fetchone()
    conn.close()
    return dict(row) if row else None


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
@router.post("/login")
def login(body: LoginRequest):
    user = _get_user_by_email(body.email)
    if not user or not verify_password(body.password, user["password_hash"]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    identity = Identity(
        email=user["email"],
        name=user.get("display_name") or user["email"],
        is_admin=bool(user["is_admin"]),
    )
    return {
        "token": create_token(identity),
        "teacherEmail": identity.email,
        "teacherName": identity.name,
        "isAdmin": identity.is_admin,
    }


@router.post("/logout")
def logout(identity: Identity = Depends(get_current_identity)):
    # Stateless JWT: the client discards its token.
    return {"detail": "Logged out successfully"}


@router.get("/check")
def check_auth(identity: Optional[Identity] = Depends(optional_current_identity)):
    if identity is None:
        return {"authenticated": False}
    return {
        "authenticated": True,
        "teacherEmail": identity.email,
        "teacherName": identity.name,
        "isAdmin": identity.is_admin,
    }
