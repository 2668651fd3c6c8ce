class RatesException(Exception):
	pass


class InvalidRateError(RatesException, ValueError):
	pass


class InvalidAmountError(RatesException, ValueError):
	pass


class RemoteUnavailableError(RatesException):
	pass


class CacheCorruptError(RatesException):
	pass


class CacheWriteError(RatesException):
	pass
