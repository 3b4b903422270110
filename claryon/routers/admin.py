from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
import logging

from claryon.core.database import get_db
from claryon.core.auth import AuthUtils, get_current_admin
from claryon.models.admin import Admin
from claryon.schemas.admin import AdminLogin, AdminLoginResponse, AdminResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login", response_model=AdminLoginResponse, status_code=status.HTTP_200_OK)
def login(
    login_data: AdminLogin,
    db: Session = Depends(get_db)
):
    """
    Authenticate an admin with username (or email) and password.

    Args:
        login_data: Login credentials
        db: Database session

    Returns:
        JWT access token and admin information

    Raises:
        HTTPException: If credentials are invalid or account is inactive
    """
    admin = db.query(Admin).filter(
        or_(Admin.username == login_data.username, Admin.email == login_data.username)
    ).first()

    if not admin or not AuthUtils.verify_password(login_data.password, admin.hashed_password):
        logger.warning(f"[Admin] Failed login attempt for '{login_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact administrator."
        )

    access_token = AuthUtils.create_access_token(
        data={"sub": admin.username, "admin_id": admin.id}
    )

    return AdminLoginResponse(
        access_token=access_token,
        token_type="bearer",
        admin=AdminResponse.model_validate(admin)
    )


@router.get("/me", response_model=AdminResponse)
def read_current_admin(current_admin: Admin = Depends(get_current_admin)):
    """Profile of the logged in admin."""
    return AdminResponse.model_validate(current_admin)
