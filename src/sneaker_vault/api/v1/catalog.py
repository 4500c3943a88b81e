from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from sneaker_vault.api.dependencies import get_catalog_service
from sneaker_vault.core.rate_limit import limiter, upstream_limit
from sneaker_vault.domain.models import SneakerDetail, SneakerSummary
from sneaker_vault.domain.ports import ExternalApiError, SneakerNotFoundError
from sneaker_vault.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]

_CACHE_CONTROL = "public, s-maxage=86400"


@router.get("/search", response_model=list[SneakerSummary])
@limiter.limit(upstream_limit)
async def search_sneakers(
    request: Request,
    service: CatalogServiceDep,
    response: Response,
    q: str = "",
    limit: int = Query(10, ge=1, le=20),
) -> list[SneakerSummary]:
    """
    Sucht Sneaker beim Upstream-Provider.
    """
    if not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'q' is required",
        )
    try:
        results = await service.search(q, limit=limit)
    except ExternalApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    response.headers["Cache-Control"] = _CACHE_CONTROL
    return results


@router.get("/items/{style_id}", response_model=SneakerDetail)
@limiter.limit(upstream_limit)
async def get_sneaker(
    request: Request,
    service: CatalogServiceDep,
    response: Response,
    style_id: str,
) -> SneakerDetail:
    """
    Liefert Details, Bilder und Resell-Preise eines Sneakers.
    """
    try:
        sneaker = await service.get_sneaker(style_id)
    except SneakerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ExternalApiError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    response.headers["Cache-Control"] = _CACHE_CONTROL
    return sneaker
