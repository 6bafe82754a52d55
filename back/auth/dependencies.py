"""
인증 관련 의존성 주입
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from database import get_db
from models.enums import Role
from models.user import User
from auth.security import decode_access_token

# Bearer 토큰 스키마
security = HTTPBearer()


@dataclass(frozen=True)
class AuthContext:
    """인증된 요청 주체 (사용자 ID + 역할)"""
    user_id: int
    role: Role


def _credentials_exception(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    JWT 토큰에서 현재 사용자 정보 추출

    Args:
        credentials: Bearer 토큰
        db: 데이터베이스 세션

    Returns:
        User: 현재 사용자 객체

    Raises:
        HTTPException: 토큰이 유효하지 않거나 사용자를 찾을 수 없는 경우
    """
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _credentials_exception()

    # 사용자 ID 추출 (sub는 문자열로 저장됨)
    user_id_str = payload.get("sub")
    if user_id_str is None:
        raise _credentials_exception()

    try:
        user_id: int = int(user_id_str)
    except (ValueError, TypeError):
        raise _credentials_exception("Invalid user ID in token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _credentials_exception("User not found")

    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """현재 활성 사용자 확인"""
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_auth_context(
    current_user: User = Depends(get_current_active_user)
) -> AuthContext:
    """역할은 토큰이 아니라 DB의 현재 값을 기준으로 한다"""
    return AuthContext(user_id=current_user.id, role=Role(current_user.role))
