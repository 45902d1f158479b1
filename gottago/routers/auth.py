from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from gottago.deps import get_required_db
from gottago.models import LoginRequest, Token, UserCreate, UserPublic
from gottago.security.auth import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)

router = APIRouter()


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, database=Depends(get_required_db)):
    exists = await database["users"].find_one({"email": data.email})
    if exists:
        raise HTTPException(status_code=400, detail="Email already registered")

    now = datetime.now(timezone.utc)
    doc = {
        "email": data.email,
        "hashed_password": hash_password(data.password),
        "full_name": data.full_name,
        "avatar_url": None,
        "role": "user",
        "created_at": now,
        "updated_at": now,
    }
    res = await database["users"].insert_one(doc)
    doc["_id"] = str(res.inserted_id)
    return doc


@router.post("/login", response_model=Token)
async def login(form: LoginRequest, database=Depends(get_required_db)):
    """
    Body(JSON):
    { "email": "user@example.com", "password": "..." }
    """
    user = await database["users"].find_one({"email": form.email})
    if not user or not verify_password(form.password, user.get("hashed_password", "")):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return Token(access_token=create_access_token(subject=user["email"]))


@router.get("/me", response_model=UserPublic)
async def me(current_user=Depends(get_current_user)):
    current_user["_id"] = str(current_user["_id"])
    return current_user
