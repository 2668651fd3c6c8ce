# nosec B101


from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from domain.models.rates import BCV_LABEL, PARALLEL_LABEL, Rate, get_default_rates
from infrastructure.providers.firestore import FirestoreRateSource

DOC_PREFIX = 'projects/demo/databases/ratesve/documents/rates'


def rate_document(doc_id: str, currency_key: str, rate_value: dict) -> dict:
    return {
        'name': f'{DOC_PREFIX}/{doc_id}',
        'fields': {
            'currencies': {
                'mapValue': {
                    'fields': {
                        currency_key: {
                            'mapValue': {
                                'fields': {
                                    'code': {'stringValue': currency_key},
                                    'rate': rate_value,
                                }
                            }
                        }
                    }
                }
            },
            'lastUpdated': {'timestampValue': '2025-03-14T12:00:05.123456789Z'},
            'provider': {'stringValue': 'bcv.org.ve'},
        },
    }


BCV_DOC = rate_document('current_bcv', 'USD', {'doubleValue': 36.52})
PARALELO_DOC = rate_document('current_paralelo', 'EnParaleloVzla', {'doubleValue': 39.1})


def json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status = Mock()
    return response


def make_source(mock_client, **kwargs):
    return FirestoreRateSource(
        project_id='demo', api_key='test_key', database='ratesve', client=mock_client, **kwargs
    )


@pytest.mark.asyncio
async def test_fetch_success_returns_both_rates_in_fixed_order():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = json_response({'documents': [PARALELO_DOC, BCV_DOC]})

    source = make_source(mock_client)
    rates = await source.fetch()

    assert rates == [
        Rate(BCV_LABEL, Decimal('36.52')),
        Rate(PARALLEL_LABEL, Decimal('39.1')),
    ]
    mock_client.get.assert_called_once()
    call_args = mock_client.get.call_args
    assert call_args[0][0] == (
        'https://firestore.googleapis.com/v1/projects/demo/databases/ratesve/documents/rates'
    )
    assert call_args[1]['params']['key'] == 'test_key'
    assert call_args[1]['params']['pageSize'] == FirestoreRateSource.PAGE_SIZE


@pytest.mark.asyncio
async def test_fetch_accepts_integer_values():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    bcv = rate_document('current_bcv', 'USD', {'integerValue': '37'})
    mock_client.get.return_value = json_response({'documents': [bcv]})

    rates = await make_source(mock_client).fetch()

    assert rates == [Rate(BCV_LABEL, Decimal('37'))]


@pytest.mark.asyncio
async def test_fetch_follows_page_tokens():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = [
        json_response({'documents': [BCV_DOC], 'nextPageToken': 'page-2'}),
        json_response({'documents': [PARALELO_DOC]}),
    ]

    rates = await make_source(mock_client).fetch()

    assert [r.name for r in rates] == [BCV_LABEL, PARALLEL_LABEL]
    assert mock_client.get.call_count == 2
    assert mock_client.get.call_args_list[1][1]['params']['pageToken'] == 'page-2'


@pytest.mark.asyncio
async def test_fetch_drops_invalid_rate_and_keeps_valid_one():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    broken = rate_document('current_paralelo', 'EnParaleloVzla', {'stringValue': 'n/a'})
    mock_client.get.return_value = json_response({'documents': [BCV_DOC, broken]})

    rates = await make_source(mock_client).fetch()

    assert rates == [Rate(BCV_LABEL, Decimal('36.52'))]


@pytest.mark.asyncio
async def test_fetch_ignores_unknown_documents_and_shapes():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    wrong_key = rate_document('current_bcv', 'EUR', {'doubleValue': 40.0})
    other = rate_document('history_2024', 'USD', {'doubleValue': 10.0})
    no_fields = {'name': f'{DOC_PREFIX}/current_paralelo'}
    mock_client.get.return_value = json_response({'documents': [wrong_key, other, no_fields]})

    rates = await make_source(mock_client).fetch()

    assert rates == get_default_rates()


@pytest.mark.asyncio
async def test_fetch_empty_collection_returns_defaults():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = json_response({})

    rates = await make_source(mock_client).fetch()

    assert rates == get_default_rates()


@pytest.mark.asyncio
async def test_fetch_http_error_returns_defaults():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    error_response = Mock()
    error_response.status_code = 403
    error_response.text = 'Permission denied'
    error_response.json.return_value = {'error': {'message': 'Missing or insufficient permissions.'}}
    mock_client.get.side_effect = httpx.HTTPStatusError(
        'Forbidden', request=Mock(), response=error_response
    )

    rates = await make_source(mock_client).fetch()

    assert rates == get_default_rates()


@pytest.mark.asyncio
async def test_fetch_network_timeout_returns_defaults():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ConnectTimeout('Timed out')

    rates = await make_source(mock_client).fetch()

    assert rates == get_default_rates()


@pytest.mark.asyncio
async def test_fetch_invalid_json_returns_defaults():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    response = Mock()
    response.raise_for_status = Mock()
    response.json.side_effect = ValueError('Expecting value')
    mock_client.get.return_value = response

    rates = await make_source(mock_client).fetch()

    assert rates == get_default_rates()


@pytest.mark.asyncio
async def test_api_key_is_optional():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = json_response({'documents': [BCV_DOC]})
    source = FirestoreRateSource(project_id='demo', client=mock_client)

    await source.fetch()

    assert 'key' not in mock_client.get.call_args[1]['params']
    assert '/databases/(default)/' in mock_client.get.call_args[0][0]


@pytest.mark.asyncio
async def test_close_closes_http_client():
    mock_client = AsyncMock(spec=httpx.AsyncClient)

    await make_source(mock_client).close()

    mock_client.aclose.assert_awaited_once()
