"""Auth router: the authenticated user."""

from fastapi import APIRouter, Depends

from regintel.auth.database import User
from regintel.core.schemas import StandardResponse
from regintel.web.dependencies import get_current_user
from regintel.web.serializers import serialize

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"]
)


@router.get("/me", response_model=StandardResponse[dict], summary="Current User")
async def get_me(user: User = Depends(get_current_user)):
    return StandardResponse(data=serialize(user))
