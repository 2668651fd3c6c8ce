import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from domain.exceptions.rates import CacheCorruptError, CacheWriteError
from domain.models.rates import CacheSnapshot, Rate, datetime_to_epoch_ms
from infrastructure.cache.base import PersistentCacheStore, utc_now
from infrastructure.cache.serialization import (
	RATES_KEY,
	TIMESTAMP_KEY,
	decode_snapshot,
	encode_rates,
	encode_timestamp,
)
from infrastructure.persistence.database import Database
from infrastructure.persistence.models.cache_entry import CacheEntryDB

logger = logging.getLogger(__name__)


class SqlCacheStore(PersistentCacheStore):
	"""Snapshot store backed by a SQL key-value table (SQLite on device)."""

	name = 'sql'

	def __init__(
		self,
		db: Database,
		key_prefix: str = '',
		clock: Callable[[], datetime] = utc_now,
	):
		super().__init__(clock)
		self.db = db
		self.rates_key = f'{key_prefix}{RATES_KEY}'
		self.timestamp_key = f'{key_prefix}{TIMESTAMP_KEY}'

	async def read(self) -> CacheSnapshot | None:
		try:
			async with self.db.session() as session:
				result = await session.execute(
					select(CacheEntryDB).filter(
						CacheEntryDB.key.in_([self.rates_key, self.timestamp_key])
					)
				)
				entries = {entry.key: entry.value for entry in result.scalars().all()}
		except SQLAlchemyError as e:
			logger.error(f'Error reading rates from database: {e}')
			return None

		try:
			return decode_snapshot(entries.get(self.rates_key), entries.get(self.timestamp_key))
		except CacheCorruptError as e:
			logger.info(f'No valid cache data found in database: {e}')
			return None

	async def write(self, rates: Sequence[Rate]) -> bool:
		now = self._clock()
		entries = {
			self.rates_key: encode_rates(rates),
			self.timestamp_key: encode_timestamp(datetime_to_epoch_ms(now)),
		}
		try:
			await self._persist(entries, now)
		except CacheWriteError as e:
			logger.error(f'Error writing rates to database: {e}')
			return False

		logger.info('Rates successfully saved to database cache.')
		return True

	async def _persist(self, entries: dict[str, str], now: datetime) -> None:
		# Both rows are replaced inside one transaction.
		try:
			async with self.db.session() as session:
				for key, value in entries.items():
					await session.merge(CacheEntryDB(key=key, value=value, updated_at=now))
		except SQLAlchemyError as e:
			raise CacheWriteError(f'Database rejected write: {e}') from e

	async def close(self) -> None:
		await self.db.close()
