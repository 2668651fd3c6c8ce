import logging
from datetime import datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends
from redis.asyncio import Redis

from application.services import CacheCoordinator, ConversionService
from config.settings import Settings, get_settings
from infrastructure.cache.base import PersistentCacheStore
from infrastructure.cache.redis_cache import RedisCacheStore
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.cache import SqlCacheStore
from infrastructure.providers import FirestoreRateSource, RateSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	cache_store: PersistentCacheStore | None = None
	rate_source: RateSource | None = None


deps = AppDependencies()


def build_cache_store(settings: Settings) -> PersistentCacheStore:
	backend = settings.CACHE_BACKEND.lower()
	if backend == 'redis':
		redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		return RedisCacheStore(redis_client, key_prefix=settings.CACHE_KEY_PREFIX)
	if backend == 'sql':
		deps.db = Database(settings.DATABASE_URL)
		return SqlCacheStore(deps.db, key_prefix=settings.CACHE_KEY_PREFIX)
	raise ValueError(f'Unknown cache backend: {settings.CACHE_BACKEND}')


def build_clock(settings: Settings):
	if not settings.TIMEZONE:
		return lambda: datetime.now().astimezone()
	zone = ZoneInfo(settings.TIMEZONE)
	return lambda: datetime.now(zone)


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.cache_store = build_cache_store(settings)
	deps.rate_source = FirestoreRateSource(
		project_id=settings.FIRESTORE_PROJECT_ID,
		api_key=settings.FIRESTORE_API_KEY,
		database=settings.FIRESTORE_DATABASE,
		collection=settings.FIRESTORE_COLLECTION,
		timeout=settings.FETCH_TIMEOUT_SECONDS,
	)
	logger.info(f'Dependencies initialized (cache backend: {deps.cache_store.name})')


async def bootstrap() -> None:
	"""Prepare storage. Called after init_dependencies() at startup."""
	if deps.db is not None:
		await deps.db.create_tables()
		logger.info('Cache tables created')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.cache_store:
		await deps.cache_store.close()
	if deps.rate_source:
		await deps.rate_source.close()

	logger.info('Cleanup complete')


def get_cache_store() -> PersistentCacheStore:
	if deps.cache_store is None:
		raise RuntimeError('Cache store not initialized')
	return deps.cache_store


def get_rate_source() -> RateSource:
	if deps.rate_source is None:
		raise RuntimeError('Rate source not initialized')
	return deps.rate_source


def get_cache_coordinator(
	store: Annotated[PersistentCacheStore, Depends(get_cache_store)],
	source: Annotated[RateSource, Depends(get_rate_source)],
) -> CacheCoordinator:
	settings = get_settings()
	return CacheCoordinator(
		store=store,
		source=source,
		clock=build_clock(settings),
		fetch_timeout=settings.FETCH_TIMEOUT_SECONDS,
	)


def get_conversion_service(
	coordinator: Annotated[CacheCoordinator, Depends(get_cache_coordinator)],
) -> ConversionService:
	return ConversionService(coordinator=coordinator)
