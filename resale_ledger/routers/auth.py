import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from resale_ledger.core.auth import SESSION_KEY, is_authenticated, login_enabled, verify_password

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    password: Optional[str] = None


@router.post("/login")
def login(request: Request, payload: LoginRequest):
    if not payload.password:
        return JSONResponse({"error": "Password required"}, status_code=400)

    if not login_enabled():
        return JSONResponse(
            {"error": "Login is not configured. Set ADMIN_PASSWORD in the environment."},
            status_code=400,
        )

    try:
        valid = verify_password(payload.password)
    except ValueError as exc:
        logger.error("Login check failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=500)

    if not valid:
        return JSONResponse({"error": "Invalid password"}, status_code=401)

    request.session[SESSION_KEY] = True
    return {"success": True}


@router.get("/check")
def check(request: Request):
    return {"authenticated": is_authenticated(request)}


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


__all__ = ["router"]
