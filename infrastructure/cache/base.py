from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from domain.models.rates import CacheSnapshot, Rate, datetime_to_epoch_ms


def utc_now() -> datetime:
	return datetime.now(UTC)


class PersistentCacheStore(ABC):
	"""Durable home of the single rate snapshot kept per device.

	Implementations never raise: unreadable data reads as None and a
	rejected write returns False.
	"""

	name: str = 'abstract'

	def __init__(self, clock: Callable[[], datetime] = utc_now):
		self._clock = clock

	@abstractmethod
	async def read(self) -> CacheSnapshot | None:
		...

	@abstractmethod
	async def write(self, rates: Sequence[Rate]) -> bool:
		...

	def _now_ms(self) -> int:
		return datetime_to_epoch_ms(self._clock())

	async def close(self) -> None:
		"""Release backend resources."""
