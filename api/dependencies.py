"""API Dependencies - Authentication

Stands in for the external identity provider: resolves the bearer token of a
request to the owning tenant. Routes never run without a resolved owner.
"""
from typing import Dict, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from domain.auth import Owner, OwnerInDB
from infrastructure.security import decode_access_token, get_password_hash, verify_password

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# Demo account store; in production the identity provider owns these
_accounts = {
    "admin": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "username": "admin",
        "full_name": "Admin Owner",
        "email": "admin@example.com",
        "plain_password": "admin123",
        "disabled": False,
    },
    "manager": {
        "id": "9b2f6c1e-4d7a-4f0e-8a51-2c3d4e5f6a7b",
        "username": "manager",
        "full_name": "Second Owner",
        "email": "manager@example.com",
        "plain_password": "manager123",
        "disabled": False,
    },
    "inactive": {
        "id": "0f1e2d3c-4b5a-4697-8877-665544332211",
        "username": "inactive",
        "full_name": "Disabled Owner",
        "email": None,
        "plain_password": "inactive123",
        "disabled": True,
    },
}

_password_hash_cache: Dict[str, str] = {}


def _hashed_password(username: str) -> str:
    """Hash demo passwords lazily on first access"""
    if username not in _password_hash_cache:
        _password_hash_cache[username] = get_password_hash(_accounts[username]["plain_password"])
    return _password_hash_cache[username]


def get_account(username: str) -> Optional[OwnerInDB]:
    record = _accounts.get(username)
    if record is None:
        return None
    fields = {k: v for k, v in record.items() if k != "plain_password"}
    return OwnerInDB(**fields, hashed_password=_hashed_password(username))


def find_account_by_id(owner_id: UUID) -> Optional[OwnerInDB]:
    for username, record in _accounts.items():
        if record["id"] == str(owner_id):
            return get_account(username)
    return None


def authenticate(username: str, password: str) -> Optional[OwnerInDB]:
    account = get_account(username)
    if account is None or not verify_password(password, account.hashed_password):
        return None
    return account


async def get_current_owner(token: str = Depends(oauth2_scheme)) -> Owner:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    owner_id = decode_access_token(token)
    if owner_id is None:
        raise credentials_exception
    account = find_account_by_id(owner_id)
    if account is None:
        raise credentials_exception
    return account


async def get_current_active_owner(current_owner: Owner = Depends(get_current_owner)) -> Owner:
    if current_owner.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_owner
