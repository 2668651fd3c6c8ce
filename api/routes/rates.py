from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_cache_coordinator, get_conversion_service
from api.schemas import (
	ConversionRequest,
	ConversionResponse,
	ConvertedAmountItem,
	RateItem,
	RatesResponse,
)
from application.services import CacheCoordinator, ConversionService, parse_amount
from domain.models.conversion import ConversionDirection, ConversionResult

router = APIRouter(prefix='/api', tags=['rates'])


def _to_response(result: ConversionResult) -> ConversionResponse:
	return ConversionResponse(
		direction=result.direction.value,
		original_amount=result.original_amount,
		results=[
			ConvertedAmountItem(label=row.label, rate=row.rate, amount=row.amount)
			for row in result.rows
		],
		origin=result.origin.value,
		updated_at=result.updated_at,
	)


@router.get(
	'/rates',
	response_model=RatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get current exchange rates',
)
async def get_rates(
	coordinator: Annotated[CacheCoordinator, Depends(get_cache_coordinator)],
) -> RatesResponse:
	lookup = await coordinator.resolve()
	return RatesResponse(
		rates=[RateItem(name=rate.name, rate=rate.value) for rate in lookup.rates],
		origin=lookup.origin.value,
		updated_at=lookup.updated_at,
	)


@router.get(
	'/convert/{direction}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert an amount with every displayed rate',
)
async def convert_amount(
	direction: ConversionDirection,
	amount: Annotated[str, Path(min_length=1, max_length=32)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(parse_amount(amount), direction)
	return _to_response(result)


@router.post(
	'/convert',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert a user-typed amount',
)
async def convert_request(
	request: ConversionRequest,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	amount = request.amount
	if isinstance(amount, str):
		amount = parse_amount(amount)
	result = await service.convert(amount, request.direction)
	return _to_response(result)
