import contextlib
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from domain.exceptions.rates import RemoteUnavailableError
from domain.models.rates import BCV_LABEL, PARALLEL_LABEL, Rate, get_default_rates
from infrastructure.providers.base import RateSource
from infrastructure.providers.firestore_values import decode_value, document_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateDocument:
	document_id: str
	currency_key: str
	label: str


RATE_DOCUMENTS: tuple[RateDocument, ...] = (
	RateDocument('current_bcv', 'USD', BCV_LABEL),
	RateDocument('current_paralelo', 'EnParaleloVzla', PARALLEL_LABEL),
)


class FirestoreRateSource(RateSource):
	"""Reads the official and parallel rates from a Firestore collection.

	``fetch`` never raises; on any failure it returns the default rates.
	"""

	BASE_URL = 'https://firestore.googleapis.com/v1'
	PAGE_SIZE = 50

	def __init__(
		self,
		project_id: str,
		api_key: str = '',
		database: str = '(default)',
		collection: str = 'rates',
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
		documents: tuple[RateDocument, ...] = RATE_DOCUMENTS,
	):
		self.project_id = project_id
		self.api_key = api_key
		self.database = database
		self.collection = collection
		self.documents = documents
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'firestore'

	@property
	def collection_url(self) -> str:
		return (
			f'{self.BASE_URL}/projects/{self.project_id}'
			f'/databases/{self.database}/documents/{self.collection}'
		)

	async def _request(self, params: dict) -> dict:
		if self.api_key:
			params['key'] = self.api_key

		try:
			response = await self._client.get(self.collection_url, params=params)
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			msg = None
			with contextlib.suppress(Exception):
				msg = e.response.json().get('error', {}).get('message')
			raise RemoteUnavailableError(
				f'Firestore HTTP error {e.response.status_code}: {msg or e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise RemoteUnavailableError(f'Firestore request failed: {e.__class__.__name__}') from e
		except ValueError as e:
			raise RemoteUnavailableError(f'Firestore response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise RemoteUnavailableError('Firestore response is not a JSON object')
		return data

	async def list_documents(self) -> list[dict[str, Any]]:
		documents: list[dict[str, Any]] = []
		page_token = None
		while True:
			params: dict[str, Any] = {'pageSize': self.PAGE_SIZE}
			if page_token:
				params['pageToken'] = page_token

			data = await self._request(params)
			documents.extend(d for d in data.get('documents', []) if isinstance(d, dict))

			page_token = data.get('nextPageToken')
			if not page_token:
				return documents

	def _extract_rate(self, document: dict[str, Any], spec: RateDocument) -> Rate | None:
		fields = document.get('fields')
		currencies = fields.get('currencies') if isinstance(fields, dict) else None
		if not isinstance(currencies, dict):
			return None
		try:
			decoded = decode_value(currencies)
		except (ValueError, TypeError, AttributeError) as e:
			logger.warning(f'Skipping malformed document {spec.document_id}: {e}')
			return None

		if not isinstance(decoded, dict):
			return None
		record = decoded.get(spec.currency_key)
		if not isinstance(record, dict):
			return None

		rate = Rate.parse(spec.label, record.get('rate'))
		if rate is None:
			logger.warning(f'Dropping invalid rate in {spec.document_id}: {record.get("rate")!r}')
		return rate

	def parse_rates(self, documents: list[dict[str, Any]]) -> list[Rate]:
		by_id = {document_id(d): d for d in documents}
		rates = []
		for spec in self.documents:
			document = by_id.get(spec.document_id)
			if document is None:
				continue
			rate = self._extract_rate(document, spec)
			if rate is not None:
				rates.append(rate)
		return rates

	async def fetch(self) -> list[Rate]:
		try:
			documents = await self.list_documents()
		except RemoteUnavailableError as e:
			logger.error(f'Error fetching exchange rates from Firestore: {e}')
			return get_default_rates()

		rates = self.parse_rates(documents)
		if not rates:
			logger.warning('No valid rates found in Firestore, using default rates')
			return get_default_rates()

		logger.info(f'Fetched {len(rates)} rates from Firestore')
		return rates

	async def close(self) -> None:
		await self._client.aclose()
