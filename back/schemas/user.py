"""
User 관련 Pydantic 스키마
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from models.enums import Role


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    full_name: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=72)
    role: Role = Role.USER

    @field_validator("role")
    @classmethod
    def reject_admin(cls, value: Role) -> Role:
        # 관리자 계정은 가입으로 만들 수 없음
        if value == Role.ADMIN:
            raise ValueError("ADMIN role cannot be self-registered")
        return value


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(UserBase):
    id: int
    role: Role
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
