from fastapi import APIRouter, Depends

from om_intel.schemas.user import UserOut
from om_intel.services.auth_service import AuthenticatedUser, get_current_user

router = APIRouter(prefix='/me', tags=['me'])


@router.get('', response_model=UserOut)
def get_me(user: AuthenticatedUser = Depends(get_current_user)) -> UserOut:
    return UserOut(id=user.id, email=user.email, is_active=True)
