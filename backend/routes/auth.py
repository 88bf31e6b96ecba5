from fastapi import APIRouter, Depends

from utils.auth import CurrentUser, get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me")
async def me(user: CurrentUser = Depends(get_current_user)):
    """Identity resolved from the bearer token"""
    return {"user": user.model_dump()}
