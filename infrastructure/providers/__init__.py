from .base import RateSource
from .firestore import RATE_DOCUMENTS, FirestoreRateSource, RateDocument

__all__ = ['RateSource', 'FirestoreRateSource', 'RateDocument', 'RATE_DOCUMENTS']
