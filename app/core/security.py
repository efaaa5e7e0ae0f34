from datetime import datetime, timedelta, timezone
from typing import Optional, Any, Union, Dict
from jose import JWTError, jwt
import logging
import secrets

from app.core.config import settings

logger = logging.getLogger(__name__)


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None
) -> str:
    """액세스 토큰 생성"""
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {
        "exp": expire,
        "sub": str(subject),
        "iat": now,
        "nbf": now,
        "jti": secrets.token_urlsafe(32),
        "type": "access"
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """토큰 검증. 유효하지 않으면 None"""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )

        # 필수 클레임 검증
        if not all(key in payload for key in ["sub", "exp", "iat", "jti"]):
            return None

        if payload.get("type") != "access":
            return None

        return payload

    except JWTError as e:
        logger.info(f"JWT verification failed: {str(e)}")
        return None
