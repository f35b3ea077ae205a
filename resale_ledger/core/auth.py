from __future__ import annotations

import hashlib
import hmac

from fastapi import HTTPException, Request, status

from resale_ledger.config import get_settings

SESSION_KEY = "authenticated"


def login_enabled() -> bool:
    settings = get_settings()
    return bool(settings.ADMIN_PASSWORD or settings.ADMIN_PASSWORD_HASH)


def _hash_password(password: str, salt: str, rounds: int) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    )
    return digest.hex()


def verify_password(password: str) -> bool:
    settings = get_settings()
    if not login_enabled():
        return False

    password = password.strip()

    if settings.ADMIN_PASSWORD_HASH:
        if not settings.ADMIN_PASSWORD_SALT:
            raise ValueError("Admin password salt is not configured.")
        computed = _hash_password(
            password,
            settings.ADMIN_PASSWORD_SALT,
            settings.ADMIN_PBKDF2_ROUNDS,
        )
        return hmac.compare_digest(
            computed.encode("utf-8"),
            settings.ADMIN_PASSWORD_HASH.strip().encode("utf-8"),
        )

    if settings.ADMIN_PASSWORD:
        return hmac.compare_digest(
            password.encode("utf-8"),
            settings.ADMIN_PASSWORD.strip().encode("utf-8"),
        )

    return False


def is_authenticated(request: Request) -> bool:
    if not login_enabled():
        return True
    return bool(request.session.get(SESSION_KEY))


def require_login_api(request: Request) -> None:
    if is_authenticated(request):
        return
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
