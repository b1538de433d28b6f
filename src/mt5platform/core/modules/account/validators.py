from mt5platform.core.modules.account.models import AccountType, Provider
from mt5platform.errors import ValidationError


def validate_provider(provider: str) -> Provider:
    """Parse a provider name case-insensitively."""
    try:
        return Provider(provider.lower())
    except ValueError:
        raise ValidationError("Invalid provider. Must be one of: ftmo, forex, xm") from None


def validate_account_type(account_type: str) -> AccountType:
    """Parse an account type case-insensitively."""
    try:
        return AccountType(account_type.lower())
    except ValueError:
        raise ValidationError("Invalid account type. Must be one of: challenge, verification, live") from None


def validate_base_balance(value: object) -> float:
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
        raise ValidationError("Base balance must be a non-negative number")
    return float(value)
