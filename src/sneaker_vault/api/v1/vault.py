from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Security, status

from sneaker_vault.api.dependencies import get_vault_service
from sneaker_vault.core.security import get_user_id
from sneaker_vault.domain.models import SavedSneakerCreate, VaultItem, VaultStatus
from sneaker_vault.domain.ports import DuplicateItemError, ItemNotFoundError
from sneaker_vault.services.vault_service import VaultService

router = APIRouter(prefix="/vault", tags=["Vault"])

UserDep = Annotated[str, Security(get_user_id)]
VaultServiceDep = Annotated[VaultService, Depends(get_vault_service)]


@router.get("", response_model=list[VaultItem])
async def list_vault(user_id: UserDep, service: VaultServiceDep) -> list[VaultItem]:
    return await service.list_items(user_id)


@router.post("", response_model=VaultItem, status_code=status.HTTP_201_CREATED)
async def add_to_vault(
    user_id: UserDep,
    service: VaultServiceDep,
    payload: SavedSneakerCreate,
) -> VaultItem:
    try:
        return await service.add(user_id, payload)
    except DuplicateItemError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/{style_id}", response_model=VaultStatus)
async def vault_status(user_id: UserDep, service: VaultServiceDep, style_id: str) -> VaultStatus:
    """Existenzprüfung für (User, Sneaker)."""
    return VaultStatus(sneaker_id=style_id, saved=await service.is_saved(user_id, style_id))


@router.delete("/{style_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_vault(user_id: UserDep, service: VaultServiceDep, style_id: str) -> None:
    try:
        await service.remove(user_id, style_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
