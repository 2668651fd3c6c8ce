import logging
import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from application.services.cache_coordinator import CacheCoordinator
from domain.exceptions.rates import InvalidAmountError
from domain.models.conversion import ConversionDirection, ConversionResult, ConvertedAmount
from domain.models.rates import AVERAGE_LABEL, Rate

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
MAX_AMOUNT_LENGTH = 9
_NOT_AMOUNT_CHARS = re.compile(r'[^0-9.]')


def parse_amount(raw: str) -> Decimal:
	"""Turn free-form user input such as ``'1.234,5 Bs'`` into a Decimal.

	Commas count as decimal points, anything but digits and points is
	dropped, only the first point is kept and the text is capped at nine
	characters.
	"""
	sanitized = _NOT_AMOUNT_CHARS.sub('', raw.replace(',', '.'))

	parts = sanitized.split('.')
	if len(parts) > 2:
		sanitized = parts[0] + '.' + ''.join(parts[1:])

	sanitized = sanitized[:MAX_AMOUNT_LENGTH]
	if sanitized in ('', '.'):
		raise InvalidAmountError(f'No amount found in {raw!r}')

	try:
		amount = Decimal(sanitized)
	except InvalidOperation as e:
		raise InvalidAmountError(f'Invalid amount: {raw!r}') from e

	if amount <= 0:
		raise InvalidAmountError('Amount must be greater than zero')
	return amount


def average_rate(rates: Sequence[Rate]) -> Rate | None:
	values = [r.value for r in rates if r.name != AVERAGE_LABEL]
	if not values:
		return None
	mean = (sum(values) / len(values)).quantize(CENTS, rounding=ROUND_HALF_UP)
	return Rate.parse(AVERAGE_LABEL, mean)


def _find(rates: Sequence[Rate], marker: str) -> Rate | None:
	return next((r for r in rates if marker in r.name), None)


def rate_table(rates: Sequence[Rate]) -> list[Rate]:
	"""Official, average and parallel rates, in display order."""
	rows = [_find(rates, 'BCV'), average_rate(rates), _find(rates, 'Paralelo')]
	return [row for row in rows if row is not None]


class ConversionService:
	def __init__(self, coordinator: CacheCoordinator):
		self.coordinator = coordinator

	async def convert(self, amount: Decimal, direction: ConversionDirection) -> ConversionResult:
		if amount <= 0:
			raise InvalidAmountError('Amount must be greater than zero')

		lookup = await self.coordinator.resolve()

		rows = []
		for rate in rate_table(lookup.rates):
			if direction is ConversionDirection.USD_TO_VES:
				converted = amount * rate.value
			else:
				converted = amount / rate.value
			rows.append(
				ConvertedAmount(
					label=rate.name,
					rate=rate.value,
					amount=converted.quantize(CENTS, rounding=ROUND_HALF_UP),
				)
			)

		logger.info(f'Converted {amount} ({direction.value}) over {len(rows)} rates')
		return ConversionResult(
			direction=direction,
			original_amount=amount,
			origin=lookup.origin,
			updated_at=lookup.updated_at,
			rows=rows,
		)
