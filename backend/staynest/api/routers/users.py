from fastapi import APIRouter

from staynest.api.dependencies import CurrentUser
from staynest.schemas.user import UserOut

router = APIRouter()


@router.get("/me", response_model=UserOut)
async def me(current_user: CurrentUser):
    return current_user
