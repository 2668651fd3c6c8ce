from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum

from domain.exceptions.rates import InvalidRateError

BCV_LABEL = 'BCV (Oficial) 🏦'
PARALLEL_LABEL = 'Paralelo 💱'
AVERAGE_LABEL = 'Promedio 📊'


def to_decimal(value) -> Decimal:
	"""Convert a JSON-ish number to Decimal without binary float noise."""
	if isinstance(value, bool):
		raise InvalidRateError(f'Rate value must be numeric, got {value!r}')
	if isinstance(value, Decimal):
		return value
	if isinstance(value, (int, float, str)):
		try:
			return Decimal(str(value).strip())
		except InvalidOperation as e:
			raise InvalidRateError(f'Rate value is not a number: {value!r}') from e
	raise InvalidRateError(f'Rate value must be numeric, got {type(value).__name__}')


@dataclass(frozen=True)
class Rate:
	name: str
	value: Decimal

	def __post_init__(self):
		if not isinstance(self.name, str) or not self.name.strip():
			raise InvalidRateError('Rate name must be a non-empty string')
		value = to_decimal(self.value)
		if not value.is_finite() or value <= 0:
			raise InvalidRateError(f'Rate value must be positive, got {value}')
		object.__setattr__(self, 'value', value)

	@classmethod
	def parse(cls, name, value) -> 'Rate | None':
		"""Build a Rate, or return None when name or value is unusable."""
		try:
			return cls(name=name, value=value)
		except InvalidRateError:
			return None


@dataclass(frozen=True)
class CacheSnapshot:
	rates: tuple[Rate, ...]
	timestamp: datetime

	@property
	def timestamp_ms(self) -> int:
		return datetime_to_epoch_ms(self.timestamp)


class RatesOrigin(str, Enum):
	CACHE = 'cache'
	REMOTE = 'remote'
	STALE_CACHE = 'stale_cache'
	DEFAULTS = 'defaults'


@dataclass(frozen=True)
class RatesLookup:
	rates: list[Rate]
	origin: RatesOrigin
	updated_at: datetime | None = None


DEFAULT_RATES: tuple[Rate, ...] = (
	Rate(BCV_LABEL, Decimal('35.88')),
	Rate(PARALLEL_LABEL, Decimal('37.5')),
	Rate(AVERAGE_LABEL, Decimal('36.69')),
)


def get_default_rates() -> list[Rate]:
	return list(DEFAULT_RATES)


def is_default_rates(rates: Iterable[Rate]) -> bool:
	"""Content equality with the defaults, ignoring order."""
	rates = list(rates)
	if len(rates) != len(DEFAULT_RATES):
		return False
	return {(r.name, r.value) for r in rates} == {(r.name, r.value) for r in DEFAULT_RATES}


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def epoch_ms_to_datetime(epoch_ms: int) -> datetime:
	return EPOCH + timedelta(milliseconds=epoch_ms)


def datetime_to_epoch_ms(moment: datetime) -> int:
	return (moment.astimezone(UTC) - EPOCH) // timedelta(milliseconds=1)
