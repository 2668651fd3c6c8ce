import json
from collections.abc import Sequence

from domain.exceptions.rates import CacheCorruptError
from domain.models.rates import CacheSnapshot, Rate, epoch_ms_to_datetime

RATES_KEY = 'cachedExchangeRatesData'
TIMESTAMP_KEY = 'lastRatesUpdateTime'


def encode_rates(rates: Sequence[Rate]) -> str:
	return json.dumps(
		[{'name': rate.name, 'rate': float(rate.value)} for rate in rates],
		ensure_ascii=False,
	)


def encode_timestamp(epoch_ms: int) -> str:
	return str(int(epoch_ms))


def decode_snapshot(rates_json: str | bytes | None, timestamp_raw: str | bytes | None) -> CacheSnapshot:
	"""Rebuild a snapshot from the two persisted entries.

	Raises CacheCorruptError when either entry is missing or malformed.
	"""
	if rates_json is None or timestamp_raw is None:
		raise CacheCorruptError('Cache entry missing')

	if isinstance(timestamp_raw, bytes):
		timestamp_raw = timestamp_raw.decode('utf-8', errors='replace')
	try:
		epoch_ms = int(timestamp_raw.strip())
	except ValueError as e:
		raise CacheCorruptError(f'Invalid timestamp: {timestamp_raw!r}') from e

	try:
		payload = json.loads(rates_json)
	except (ValueError, TypeError) as e:
		raise CacheCorruptError(f'Invalid json data: {e}') from e

	if not isinstance(payload, list) or not payload:
		raise CacheCorruptError('Cached rates must be a non-empty list')

	rates = []
	for item in payload:
		if not isinstance(item, dict):
			raise CacheCorruptError(f'Cached rate is not an object: {item!r}')
		rate = Rate.parse(item.get('name'), item.get('rate'))
		if rate is None:
			raise CacheCorruptError(f'Cached rate is malformed: {item!r}')
		rates.append(rate)

	try:
		timestamp = epoch_ms_to_datetime(epoch_ms)
	except (OverflowError, OSError, ValueError) as e:
		raise CacheCorruptError(f'Timestamp out of range: {epoch_ms}') from e

	return CacheSnapshot(rates=tuple(rates), timestamp=timestamp)
