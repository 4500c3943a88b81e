from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Security, status

from sneaker_vault.api.dependencies import get_collection_service
from sneaker_vault.core.security import get_user_id
from sneaker_vault.domain.models import (
    Collection,
    CollectionCreate,
    CollectionItem,
    SavedSneakerCreate,
)
from sneaker_vault.domain.ports import DuplicateItemError, ItemNotFoundError
from sneaker_vault.services.collection_service import CollectionService

router = APIRouter(prefix="/collections", tags=["Collections"])

UserDep = Annotated[str, Security(get_user_id)]
CollectionServiceDep = Annotated[CollectionService, Depends(get_collection_service)]


@router.get("", response_model=list[Collection])
async def list_collections(user_id: UserDep, service: CollectionServiceDep) -> list[Collection]:
    return await service.list_collections(user_id)


@router.post("", response_model=Collection, status_code=status.HTTP_201_CREATED)
async def create_collection(
    user_id: UserDep,
    service: CollectionServiceDep,
    payload: CollectionCreate,
) -> Collection:
    return await service.create(user_id, payload)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    user_id: UserDep, service: CollectionServiceDep, collection_id: str
) -> None:
    try:
        await service.delete(user_id, collection_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{collection_id}/items", response_model=list[CollectionItem])
async def list_collection_items(
    user_id: UserDep, service: CollectionServiceDep, collection_id: str
) -> list[CollectionItem]:
    try:
        return await service.list_items(user_id, collection_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "/{collection_id}/items",
    response_model=CollectionItem,
    status_code=status.HTTP_201_CREATED,
)
async def add_collection_item(
    user_id: UserDep,
    service: CollectionServiceDep,
    collection_id: str,
    payload: SavedSneakerCreate,
) -> CollectionItem:
    try:
        return await service.add_item(user_id, collection_id, payload)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateItemError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/{collection_id}/items/{style_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_collection_item(
    user_id: UserDep,
    service: CollectionServiceDep,
    collection_id: str,
    style_id: str,
) -> None:
    try:
        await service.remove_item(user_id, collection_id, style_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
