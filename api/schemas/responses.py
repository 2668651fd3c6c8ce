from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class RateItem(BaseModel):
	name: str = Field(..., description='Display label of the rate')
	rate: Decimal = Field(..., description='Bolívares per US dollar')


class RatesResponse(BaseModel):
	rates: list[RateItem] = Field(..., description='Current rates, never empty')
	origin: str = Field(..., description='cache, remote, stale_cache or defaults')
	updated_at: datetime | None = Field(None, description='When the rates were acquired')

	class ConfigDict:
		json_schema_extra = {
			'example': {
				'rates': [{'name': 'BCV (Oficial) 🏦', 'rate': 36.5}],
				'origin': 'cache',
				'updated_at': '2025-09-27T08:05:00Z',
			}
		}


class ConvertedAmountItem(BaseModel):
	label: str = Field(..., description='Rate used')
	rate: Decimal = Field(..., description='Exchange rate used for conversion')
	amount: Decimal = Field(..., description='Converted amount, 2 decimals')


class ConversionResponse(BaseModel):
	direction: str = Field(..., description='USD_TO_VES or VES_TO_USD')
	original_amount: Decimal = Field(..., description='Original amount requested')
	results: list[ConvertedAmountItem] = Field(..., description='One entry per displayed rate')
	origin: str = Field(..., description='Where the rates came from')
	updated_at: datetime | None = Field(None, description='When the rates were acquired')


class HealthResponse(BaseModel):
	status: str
	cache_backend: str
	rate_source: str
