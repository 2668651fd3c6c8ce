from .requests import ConversionRequest
from .responses import (
	ConversionResponse,
	ConvertedAmountItem,
	HealthResponse,
	RateItem,
	RatesResponse,
)

__all__ = [
	'ConversionRequest',
	'ConversionResponse',
	'ConvertedAmountItem',
	'HealthResponse',
	'RateItem',
	'RatesResponse',
]
