"""Wallet pass issuing configuration.

Google Wallet: https://developers.google.com/wallet/reference/rest
Apple Wallet: https://developer.apple.com/documentation/walletpasses
"""

from decouple import Csv, config

# Google Wallet
GOOGLE_WALLET_ISSUER_ID: str = config("GOOGLE_WALLET_ISSUER_ID", default="")
# Service account key: inline JSON or a path to the key file
GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS: str = config("GOOGLE_WALLET_SERVICE_ACCOUNT_CREDENTIALS", default="")
# ISO 8601 duration added to validTimeInterval.end of new pass objects
GOOGLE_WALLET_VALID_TIME_INTERVAL_END_GRACE: str = config("GOOGLE_WALLET_VALID_TIME_INTERVAL_END_GRACE", default="P0D")

# Apple Wallet
APPLE_WALLET_PASS_TYPE_ID: str = config("APPLE_WALLET_PASS_TYPE_ID", default="")
APPLE_WALLET_TEAM_ID: str = config("APPLE_WALLET_TEAM_ID", default="")
APPLE_WALLET_CERT_PATH: str = config("APPLE_WALLET_CERT_PATH", default="")
APPLE_WALLET_KEY_PATH: str = config("APPLE_WALLET_KEY_PATH", default="")
APPLE_WALLET_KEY_PASSWORD: str = config("APPLE_WALLET_KEY_PASSWORD", default="")
APPLE_WALLET_WWDR_CERT_PATH: str = config("APPLE_WALLET_WWDR_CERT_PATH", default="")
APPLE_WALLET_ORGANIZATION_NAME: str = config("APPLE_WALLET_ORGANIZATION_NAME", default="")
APPLE_WALLET_ICON_URL: str = config("APPLE_WALLET_ICON_URL", default="")
APPLE_WALLET_LOGO_URL: str = config("APPLE_WALLET_LOGO_URL", default="")
APPLE_WALLET_LOGO_TEXT: str = config("APPLE_WALLET_LOGO_TEXT", default="")

# Bearer tokens accepted by the wallet API
WALLET_API_TOKENS: list[str] = config("WALLET_API_TOKENS", default="", cast=Csv())
