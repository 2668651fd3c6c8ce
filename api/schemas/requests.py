from decimal import Decimal

from pydantic import BaseModel, Field

from domain.models.conversion import ConversionDirection


class ConversionRequest(BaseModel):
	direction: ConversionDirection = Field(default=ConversionDirection.USD_TO_VES)
	amount: str | Decimal = Field(..., description='Amount as typed by the user, e.g. "1.234,50"')

	class ConfigDict:
		json_schema_extra = {'example': {'direction': 'USD_TO_VES', 'amount': '100,50'}}
