from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from domain.models.rates import RatesOrigin


class ConversionDirection(str, Enum):
	USD_TO_VES = 'USD_TO_VES'
	VES_TO_USD = 'VES_TO_USD'


@dataclass(frozen=True)
class ConvertedAmount:
	label: str
	rate: Decimal
	amount: Decimal


@dataclass(frozen=True)
class ConversionResult:
	direction: ConversionDirection
	original_amount: Decimal
	origin: RatesOrigin
	updated_at: datetime | None
	rows: list[ConvertedAmount] = field(default_factory=list)
