# app/routes/users.py

from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_repository
from app.schemas.schemas import User, UserCreate, UserUpdate
from app.storage.base import Repository

router = APIRouter(
    prefix="/api/users",
    tags=["users"]
)


@router.get("/", response_model=list[User])
def get_all_users(repo: Repository = Depends(get_repository)):
    return repo.list_users()


@router.get("/{user_id}", response_model=User)
def get_user(user_id: int, repo: Repository = Depends(get_repository)):
    user = repo.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/", response_model=User, status_code=201)
def create_user(user: UserCreate, repo: Repository = Depends(get_repository)):
    """Create a user. The password is stored as a bcrypt hash and never returned."""
    return repo.create_user(user)


@router.put("/{user_id}", response_model=User)
def update_user(user_id: int, user: UserUpdate, repo: Repository = Depends(get_repository)):
    updated = repo.update_user(user_id, user)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated
