"""
Security utilities for bearer-token authentication
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import jwt
import structlog

from app.core.config import get_settings
from app.domain.value_objects import CallerIdentity

logger = structlog.get_logger(__name__)

M2M_GRANT_TYPE = "client-credentials"


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item for item in value.replace(",", " ").split() if item]
    return [str(item) for item in value]


class TokenManager:
    """JWT token management utilities"""

    def __init__(self):
        self.settings = get_settings()

    def create_access_token(
        self,
        subject: str,
        roles: Iterable[str] = (),
        handle: Optional[str] = None,
        user_id: Optional[int] = None,
        scopes: Iterable[str] = (),
        machine: bool = False,
        expires_minutes: int = 60,
    ) -> str:
        """Create a signed access token, member or machine-to-machine"""
        if not self.settings.SECRET_KEY:
            raise RuntimeError("SECRET_KEY is not configured")

        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(minutes=expires_minutes),
        }
        if machine:
            payload["gty"] = M2M_GRANT_TYPE
            payload["scope"] = " ".join(scopes)
        else:
            payload[self.settings.JWT_ROLES_CLAIM] = list(roles)
            if handle is not None:
                payload[self.settings.JWT_HANDLE_CLAIM] = handle
            if user_id is not None:
                payload[self.settings.JWT_USER_ID_CLAIM] = user_id

        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.JWT_ALGORITHM)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify and decode JWT token"""
        if not self.settings.SECRET_KEY:
            logger.warning("Token rejected, SECRET_KEY is not configured")
            return None
        try:
            return jwt.decode(
                token,
                self.settings.SECRET_KEY,
                algorithms=[self.settings.JWT_ALGORITHM],
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Token validation failed", error=str(e))
            return None

    def to_caller_identity(self, payload: Dict[str, Any]) -> CallerIdentity:
        """Convert a decoded token payload to the caller identity"""
        roles = _as_list(payload.get(self.settings.JWT_ROLES_CLAIM))
        scopes = _as_list(payload.get("scope") or payload.get("scopes"))
        is_machine = payload.get("gty") == M2M_GRANT_TYPE or (not roles and bool(scopes))

        user_id = payload.get(self.settings.JWT_USER_ID_CLAIM)
        try:
            user_id = int(user_id) if user_id is not None else None
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric user id claim", subject=payload.get("sub"))
            user_id = None

        return CallerIdentity(
            subject=str(payload.get("sub", "")),
            user_id=user_id,
            handle=payload.get(self.settings.JWT_HANDLE_CLAIM),
            roles=frozenset(roles),
            scopes=frozenset(scopes),
            is_machine=is_machine,
        )

    def authenticate(self, token: str) -> Optional[CallerIdentity]:
        payload = self.verify_token(token)
        if payload is None:
            return None
        return self.to_caller_identity(payload)


__all__ = ["TokenManager", "M2M_GRANT_TYPE"]
