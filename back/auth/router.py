"""
인증 관련 API 라우터
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from database import get_db
from models.user import User
from schemas.user import UserCreate, UserLogin, UserResponse, Token
from auth.security import verify_password, get_password_hash, create_access_token
from auth.dependencies import get_current_active_user
from config.exception import Conflict
from logs.logging_util import LoggerSingleton

# 로거 설정
logger = LoggerSingleton.get_logger(logger_name="auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    회원가입 (내담자 또는 상담사)

    Args:
        user_data: 사용자 등록 정보
        db: 데이터베이스 세션

    Returns:
        UserResponse: 생성된 사용자 정보
    """
    logger.info(f"Registration attempt: email={user_data.email}, username={user_data.username}, role={user_data.role.value}")

    # 이메일 중복 체크
    if db.query(User).filter(User.email == user_data.email).first():
        logger.warning(f"Registration failed: Email already exists - {user_data.email}")
        raise Conflict("이미 등록된 이메일입니다.", code="EMAIL_TAKEN")

    # 사용자명 중복 체크
    if db.query(User).filter(User.username == user_data.username).first():
        logger.warning(f"Registration failed: Username already exists - {user_data.username}")
        raise Conflict("이미 사용 중인 사용자명입니다.", code="USERNAME_TAKEN")

    new_user = User(
        email=user_data.email,
        username=user_data.username,
        full_name=user_data.full_name,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        is_active=True,
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"User registered successfully: id={new_user.id}, username={new_user.username}")
    return new_user


@router.post("/login", response_model=Token)
def login(user_credentials: UserLogin, db: Session = Depends(get_db)):
    """로그인 후 JWT 액세스 토큰 발급"""
    logger.info(f"Login attempt: username={user_credentials.username}")

    user = db.query(User).filter(User.username == user_credentials.username).first()

    if not user or not verify_password(user_credentials.password, user.hashed_password):
        logger.warning(f"Login failed: Invalid credentials - username={user_credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning(f"Login failed: Inactive user - username={user_credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    # sub는 문자열이어야 함
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})

    logger.info(f"Login successful: user_id={user.id}, username={user.username}")
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_active_user)):
    """현재 로그인한 사용자 정보 조회"""
    logger.info(f"User info requested: user_id={current_user.id}")
    return current_user
