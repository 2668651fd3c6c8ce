from abc import ABC, abstractmethod

from domain.models.rates import Rate


class RateSource(ABC):
	"""Remote origin of fresh rates.

	``fetch`` returns a validated, non-empty list and falls back to the
	default rates instead of raising.
	"""

	@property
	@abstractmethod
	def name(self) -> str:
		...

	@abstractmethod
	async def fetch(self) -> list[Rate]:
		...

	async def close(self) -> None:
		"""Release network resources."""
