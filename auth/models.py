"""Authentication models"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class UserRole(str, Enum):
    """Who is logging in"""
    ADMIN = "admin"
    PARTNER = "partner"


class LoginRequest(BaseModel):
    """Login request model"""
    id: str = ""
    password: str = ""
    is_admin: bool = Field(default=False, alias="isAdmin")

    class Config:
        populate_by_name = True


class AdminSession(BaseModel):
    """Head-office administrator session"""
    role: UserRole = UserRole.ADMIN
    id: str
    name: str = "관리자"


class PartnerSession(BaseModel):
    """Partner session"""
    role: UserRole = UserRole.PARTNER
    id: str
    name: str = ""
    ceo_name: Optional[str] = None
    contact: Optional[str] = None
