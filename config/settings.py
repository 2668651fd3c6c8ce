from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Remote document store
	FIRESTORE_PROJECT_ID: str = ''
	FIRESTORE_DATABASE: str = 'ratesve'
	FIRESTORE_API_KEY: str = ''
	FIRESTORE_COLLECTION: str = 'rates'
	FETCH_TIMEOUT_SECONDS: float = 10.0

	# Persistent cache: 'sql' (device-local SQLite by default) or 'redis'
	CACHE_BACKEND: str = 'sql'
	DATABASE_URL: str = 'sqlite+aiosqlite:///./rates_cache.db'
	REDIS_URL: str = 'redis://localhost:6379'
	CACHE_KEY_PREFIX: str = ''

	# IANA zone for the daily refresh checkpoints; empty means system local time
	TIMEZONE: str = ''

	# Application
	APP_NAME: str = 'Exchange Rates API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_DIRECTORY: str = ''

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@field_validator('TIMEZONE')
	@classmethod
	def timezone_exists(cls, v: str) -> str:
		v = v.strip()
		if not v:
			return v
		try:
			ZoneInfo(v)
		except (ZoneInfoNotFoundError, ValueError) as e:
			raise ValueError(f'Unknown timezone: {v!r}') from e
		return v


@lru_cache
def get_settings() -> Settings:
	return Settings()
