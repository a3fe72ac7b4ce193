from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from uuid import UUID

from src.crud import crud_user
from src.models import user as user_models
from src.db.core import get_db
from src.services.auth import TokenService, get_current_user_id, get_token_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=user_models.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user: user_models.UserRegister,
    request: Request,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Create a user and sign them in.
    """
    db_user = crud_user.create_db_user(
        db=db, user_data=user, bcrypt_rounds=request.app.state.settings.bcrypt_rounds
    )
    return {
        "message": "User registered successfully",
        "user": db_user,
        "token": token_service.issue(db_user.id),
    }


@router.post("/login", response_model=user_models.AuthResponse)
def login(
    user_login: user_models.UserLogin,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Exchange email and password for a bearer token.
    """
    db_user = crud_user.authenticate_user(db, email=user_login.email, password=user_login.password)
    return {
        "message": "Login successful",
        "user": db_user,
        "token": token_service.issue(db_user.id),
    }


@router.get("/me", response_model=user_models.MeResponse)
def read_me(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id)
):
    return {"user": crud_user.get_user_or_404(db, user_id)}
