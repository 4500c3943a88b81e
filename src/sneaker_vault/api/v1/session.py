from typing import Annotated

from fastapi import APIRouter, Security

from sneaker_vault.core.security import get_user_id
from sneaker_vault.domain.models import SessionInfo

router = APIRouter(prefix="/session", tags=["Session"])

UserDep = Annotated[str, Security(get_user_id)]


@router.get("", response_model=SessionInfo)
async def current_session(user_id: UserDep) -> SessionInfo:
    """Liefert die Identität hinter dem API-Key."""
    return SessionInfo(user_id=user_id)
