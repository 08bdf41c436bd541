"""
Authentication API endpoints for the DarkStore dashboard
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from passlib.context import CryptContext
from pydantic import BaseModel, EmailStr

from app.core.auth import TokenUser, create_access_token, get_current_user
from app.repositories.admin_user_repository import AdminUserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

# Password hashing context (same scheme used by scripts/create_admin.py)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


@router.post("/login")
async def login(credentials: LoginRequest):
    """
    Exchange email + password for a bearer token

    Returns:
        access_token, token_type and the user profile
    """
    try:
        user = AdminUserRepository().find_by_email(credentials.email)

        if user is None or not user.is_active or not pwd_context.verify(credentials.password, user.password_hash):
            logger.warning(f"Failed login attempt for {credentials.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou senha inválidos"
            )

        token_user = TokenUser(id=str(user.id), email=user.email, name=user.name, role=user.role)
        logger.info(f"Admin login: {user.email}")

        return {
            "status": "success",
            "access_token": create_access_token(token_user),
            "token_type": "bearer",
            "user": token_user.model_dump(),
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error during login: {str(e)}")


@router.get("/me")
async def get_me(user: TokenUser = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return {"status": "success", "data": user.model_dump()}
