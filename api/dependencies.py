"""API Dependencies - Authentication"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from typing import Optional
from uuid import UUID

from domain.auth import User, UserInDB
from domain.enums import Role
from infrastructure.security import decode_access_token, get_password_hash
from api.schemas import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# Mock user table; identity management lives outside this service
_fake_users_db = {
    "admin": {
        "username": "admin",
        "full_name": "Admin User",
        "email": "admin@example.com",
        "plain_password": "admin123",
        "disabled": False,
        "roles": [Role.ADMIN, Role.HOST, Role.GUEST],
        "user_id": "123e4567-e89b-12d3-a456-426614174000"
    },
    "host": {
        "username": "host",
        "full_name": "Harriet Host",
        "email": "host@example.com",
        "plain_password": "host123",
        "disabled": False,
        "roles": [Role.HOST, Role.GUEST],
        "user_id": "9b2f3c1e-4a5d-4e6f-8a7b-1c2d3e4f5a6b"
    },
    "guest": {
        "username": "guest",
        "full_name": "Gus Guest",
        "email": "guest@example.com",
        "plain_password": "guest123",
        "disabled": False,
        "roles": [Role.GUEST],
        "user_id": "5e6f7a8b-9c0d-4e1f-a2b3-c4d5e6f7a8b9"
    },
    "guest2": {
        "username": "guest2",
        "full_name": "Greta Guest",
        "email": "guest2@example.com",
        "plain_password": "guest456",
        "disabled": False,
        "roles": [Role.GUEST],
        "user_id": "0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d"
    },
    "retired": {
        "username": "retired",
        "full_name": "Former Host",
        "email": "retired@example.com",
        "plain_password": "retired123",
        "disabled": True,
        "roles": [Role.HOST],
        "user_id": "f0e1d2c3-b4a5-4697-8877-665544332211"
    }
}

# Public alias for backwards compatibility
fake_users_db = _fake_users_db

# Cache for hashed passwords
_password_hash_cache = {}

def _get_hashed_password(username: str) -> str:
    """Lazily hash passwords on first access"""
    if username not in _password_hash_cache:
        user = _fake_users_db.get(username)
        if user and "plain_password" in user:
            _password_hash_cache[username] = get_password_hash(user["plain_password"])
    return _password_hash_cache.get(username, "")

def get_user(db, username: str) -> Optional[UserInDB]:
    if username in db:
        user_dict = db[username].copy()
        # Replace plain_password with hashed_password
        if "plain_password" in user_dict:
            user_dict["hashed_password"] = _get_hashed_password(username)
            del user_dict["plain_password"]
        return UserInDB(**user_dict)
    return None

def get_user_by_id(db, user_id: UUID) -> Optional[User]:
    for username, record in db.items():
        if UUID(str(record["user_id"])) == user_id:
            return User(**{k: v for k, v in record.items() if k != "plain_password"})
    return None

async def get_current_user(token: str = Depends(oauth2_scheme)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username)
    except JWTError:
        raise credentials_exception

    user = get_user(_fake_users_db, username=token_data.username)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(current_user: User = Depends(get_current_user)):
    if current_user.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user
