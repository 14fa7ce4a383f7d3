"""Apple Wallet pass generation components."""

from wallet.apple.config import PKPassConfig
from wallet.apple.generator import ApplePassGenerator, ApplePassGeneratorError
from wallet.apple.signer import ApplePassSigner, ApplePassSignerError

__all__ = [
    "ApplePassGenerator",
    "ApplePassGeneratorError",
    "ApplePassSigner",
    "ApplePassSignerError",
    "PKPassConfig",
]
