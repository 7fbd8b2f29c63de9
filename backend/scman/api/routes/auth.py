from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from scman.api.deps import get_db
from scman.core.deps import get_current_user, require_admin
from scman.core.security import create_user_token
from scman.models.user import User
from scman.schemas import LoginRequest, LoginResponse, LoginUser, OkResponse
from scman.utils.crypto import verify_password

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == login_data.username).first()

    if not user or not user.active or not verify_password(login_data.password, user.passhash):
        logger.warning(f"Failed login for {login_data.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials."
        )

    logger.info(f"🔑 {user.username} logged in")
    return LoginResponse(
        token=create_user_token(user),
        user=LoginUser(id=user.id, name=user.username)
    )


@router.get("/vcheck", response_model=OkResponse)
def vcheck(user: User = Depends(get_current_user)):
    """Token check for any authenticated user"""
    return OkResponse()


@router.get("/adminvcheck", response_model=OkResponse)
def adminvcheck(user: User = Depends(require_admin)):
    return OkResponse()
