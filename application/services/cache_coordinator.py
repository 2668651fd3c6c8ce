import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from domain.models.rates import (
	CacheSnapshot,
	Rate,
	RatesLookup,
	RatesOrigin,
	get_default_rates,
	is_default_rates,
)
from domain.policies.staleness import StalenessPolicy
from infrastructure.cache.base import PersistentCacheStore
from infrastructure.providers.base import RateSource

logger = logging.getLogger(__name__)


def local_now() -> datetime:
	return datetime.now().astimezone()


class CacheCoordinator:
	"""Serves rates from the persistent cache and refreshes them when stale.

	Fallback order on a failed or unusable refresh is the previous snapshot,
	then the default rates. Nothing raises to the caller.
	"""

	def __init__(
		self,
		store: PersistentCacheStore,
		source: RateSource,
		policy: StalenessPolicy | None = None,
		clock: Callable[[], datetime] = local_now,
		fetch_timeout: float | None = 10.0,
	):
		self.store = store
		self.source = source
		self.policy = policy or StalenessPolicy()
		self.clock = clock
		self.fetch_timeout = fetch_timeout

	async def get_rates(self) -> list[Rate]:
		lookup = await self.resolve()
		return lookup.rates

	async def resolve(self) -> RatesLookup:
		snapshot = await self.store.read()
		last_timestamp = snapshot.timestamp if snapshot else None

		if not self.policy.needs_update(last_timestamp, self.clock()):
			logger.info('Using valid cache from persistent store.')
			return RatesLookup(list(snapshot.rates), RatesOrigin.CACHE, snapshot.timestamp)

		logger.info('Attempting to fetch fresh rates from remote source...')
		try:
			fresh = await asyncio.wait_for(self.source.fetch(), timeout=self.fetch_timeout)
		except Exception as e:
			logger.error(f'Error fetching rates from {self.source.name}: {e!r}')
			return self._fallback(snapshot)

		if fresh and not is_default_rates(fresh):
			logger.info('Remote fetch successful, updating cache.')
			if not await self.store.write(fresh):
				logger.warning('Cache write failed; serving fresh rates without persisting them.')
			return RatesLookup(list(fresh), RatesOrigin.REMOTE, self.clock())

		logger.warning('Remote fetch returned empty or default data.')
		if snapshot:
			return self._stale(snapshot)
		if fresh:
			return RatesLookup(list(fresh), RatesOrigin.DEFAULTS, None)
		return RatesLookup(get_default_rates(), RatesOrigin.DEFAULTS, None)

	def _fallback(self, snapshot: CacheSnapshot | None) -> RatesLookup:
		if snapshot:
			return self._stale(snapshot)
		logger.warning('No cache available and remote fetch failed. Using default rates.')
		return RatesLookup(get_default_rates(), RatesOrigin.DEFAULTS, None)

	def _stale(self, snapshot: CacheSnapshot) -> RatesLookup:
		logger.info(f'Using stale cache written at {snapshot.timestamp.isoformat()}.')
		return RatesLookup(list(snapshot.rates), RatesOrigin.STALE_CACHE, snapshot.timestamp)
