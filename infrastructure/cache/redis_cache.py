import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.rates import CacheCorruptError, CacheWriteError
from domain.models.rates import CacheSnapshot, Rate
from infrastructure.cache.base import PersistentCacheStore, utc_now
from infrastructure.cache.serialization import (
	RATES_KEY,
	TIMESTAMP_KEY,
	decode_snapshot,
	encode_rates,
	encode_timestamp,
)

logger = logging.getLogger(__name__)


class RedisCacheStore(PersistentCacheStore):
	name = 'redis'

	def __init__(
		self,
		redis_client: redis.Redis,
		key_prefix: str = '',
		clock: Callable[[], datetime] = utc_now,
	):
		super().__init__(clock)
		self.redis = redis_client
		self.rates_key = f'{key_prefix}{RATES_KEY}'
		self.timestamp_key = f'{key_prefix}{TIMESTAMP_KEY}'

	async def read(self) -> CacheSnapshot | None:
		try:
			# Single MGET so both entries come from the same write.
			rates_json, timestamp_raw = await self.redis.mget(self.rates_key, self.timestamp_key)
		except RedisError as e:
			logger.error(f'Error reading rates from Redis: {e}')
			return None

		try:
			return decode_snapshot(rates_json, timestamp_raw)
		except CacheCorruptError as e:
			logger.info(f'No valid cache data found in Redis: {e}')
			return None

	async def write(self, rates: Sequence[Rate]) -> bool:
		entries = {
			self.rates_key: encode_rates(rates),
			self.timestamp_key: encode_timestamp(self._now_ms()),
		}
		try:
			await self._persist(entries)
		except CacheWriteError as e:
			logger.error(f'Error writing rates to Redis: {e}')
			return False

		logger.info('Rates successfully saved to Redis cache.')
		return True

	async def _persist(self, entries: dict[str, str]) -> None:
		# MSET replaces both keys atomically.
		try:
			await self.redis.mset(entries)
		except RedisError as e:
			raise CacheWriteError(f'Redis rejected write: {e}') from e

	async def close(self) -> None:
		await self.redis.aclose()
