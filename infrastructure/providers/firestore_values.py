"""Decoding of Firestore REST typed values into plain Python values.

The REST API wraps every field as a single-key object naming its type,
for example ``{"doubleValue": 36.5}`` or ``{"mapValue": {"fields": {...}}}``.
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Any

_TIMESTAMP_RE = re.compile(
	r'^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(?P<fraction>\d+))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})$'
)


def decode_value(value: dict[str, Any]) -> Any:
	if not isinstance(value, dict) or len(value) != 1:
		raise ValueError(f'Not a Firestore value: {value!r}')

	kind, raw = next(iter(value.items()))

	if kind == 'nullValue':
		return None
	if kind in ('stringValue', 'booleanValue', 'referenceValue', 'bytesValue'):
		return raw
	if kind == 'integerValue':
		# int64 travels as a JSON string
		return int(raw)
	if kind == 'doubleValue':
		return Decimal(str(raw))
	if kind == 'timestampValue':
		return _parse_timestamp(raw)
	if kind == 'mapValue':
		return decode_fields(raw.get('fields', {}))
	if kind == 'arrayValue':
		return [decode_value(v) for v in raw.get('values', [])]
	if kind == 'geoPointValue':
		return (raw.get('latitude'), raw.get('longitude'))

	raise ValueError(f'Unsupported Firestore value type: {kind}')


def _parse_timestamp(raw: str) -> datetime:
	# RFC 3339 with up to nanosecond precision; datetime keeps microseconds.
	match = _TIMESTAMP_RE.match(raw)
	if not match:
		raise ValueError(f'Invalid Firestore timestamp: {raw!r}')
	fraction = (match['fraction'] or '')[:6].ljust(6, '0')
	offset = '+00:00' if match['offset'] in ('Z', 'z') else match['offset']
	return datetime.fromisoformat(f"{match['base']}.{fraction}{offset}")


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
	return {name: decode_value(value) for name, value in fields.items()}


def document_id(document: dict[str, Any]) -> str:
	"""Last path segment of a document resource name."""
	name = document.get('name')
	if not isinstance(name, str):
		return ''
	return name.rsplit('/', 1)[-1]
