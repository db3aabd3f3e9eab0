# app/schemas/auth.py
"""
Pydantic schemas for authentication and profile endpoints.
Field names follow the frontend's camelCase contract.
"""
from pydantic import BaseModel, EmailStr
from typing import List, Optional

class RegisterIn(BaseModel):
    """
    Request model for user registration.
    Values are validated and normalised by app.services.validators.
    """
    firstName: str
    lastName: Optional[str] = None
    emailId: EmailStr
    password: str  # Plain text, hashed server-side
    age: Optional[int] = None
    gender: Optional[str] = None
    skills: Optional[List[str]] = None
    bio: Optional[str] = None
    photoURL: Optional[str] = None

class LoginRequest(BaseModel):
    emailId: EmailStr
    password: str

class ChangePasswordIn(BaseModel):
    currentPassword: str
    newPassword: str

