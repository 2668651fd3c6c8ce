from .cache_coordinator import CacheCoordinator
from .conversion_service import ConversionService, parse_amount, rate_table

__all__ = ['CacheCoordinator', 'ConversionService', 'parse_amount', 'rate_table']
