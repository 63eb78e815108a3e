# showtime/core/auth.py

from typing import Optional
from jose import JWTError, jwt
from showtime.core.config import get_settings


def verify_token(token: str) -> Optional[str]:
    """JWT 토큰 검증. 유효하면 사용자 ID(sub) 반환"""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return str(user_id)
