"""Google Wallet class and object management components."""

from wallet.google.classes import PassClassService
from wallet.google.client import GoogleWalletObjectsClient
from wallet.google.config import GoogleWalletConfig
from wallet.google.formatting import DateIntervalFormatter
from wallet.google.kinds import PassKind
from wallet.google.normalizer import FieldNormalizer
from wallet.google.objects import PassObjectService

__all__ = [
    "DateIntervalFormatter",
    "FieldNormalizer",
    "GoogleWalletConfig",
    "GoogleWalletObjectsClient",
    "PassClassService",
    "PassKind",
    "PassObjectService",
]
