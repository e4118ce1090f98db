# app/routes/auth.py

from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_repository
from app.schemas.schemas import LoginRequest, User
from app.storage.base import Repository
from app.user_management import authenticate

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"]
)


@router.post("/login", response_model=User)
def login(credentials: LoginRequest, repo: Repository = Depends(get_repository)):
    """Check a username/password pair and return the matching active user."""
    user = authenticate(repo, credentials.username, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return user
