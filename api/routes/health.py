from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_cache_store, get_rate_source
from api.schemas import HealthResponse
from infrastructure.cache.base import PersistentCacheStore
from infrastructure.providers import RateSource

router = APIRouter(tags=['health'])


@router.get('/health', response_model=HealthResponse, summary='Liveness check')
async def health(
	store: Annotated[PersistentCacheStore, Depends(get_cache_store)],
	source: Annotated[RateSource, Depends(get_rate_source)],
) -> HealthResponse:
	return HealthResponse(status='ok', cache_backend=store.name, rate_source=source.name)
