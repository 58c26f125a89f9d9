import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request, status
from firebase_admin import auth

from painel.core.config import get_settings
from painel.core.firebase import get_firebase_app

logger = logging.getLogger("painel.session")

SESSION_COOKIE = "__session"


@dataclass(frozen=True)
class SessionContext:
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.email or ""


def _extract_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(SESSION_COOKIE) or None


def get_session_context(request: Request) -> SessionContext:
    settings = get_settings()
    token = _extract_token(request)
    if not token:
        if settings.LOCAL_STORE:
            return SessionContext(uid="local", display_name=settings.LOCAL_USER_NAME)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token ausente")
    try:
        get_firebase_app()
        decoded = auth.verify_id_token(token)
    except Exception:
        logger.warning("session token rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalido")
    return SessionContext(
        uid=decoded.get("uid", ""),
        display_name=decoded.get("name"),
        email=decoded.get("email"),
    )
