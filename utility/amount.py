import re

from base.errors import InvalidAmountFormat

AMOUNT_PATTERN = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def parse_amount(amount: str, decimals: int) -> int:
    """ Convert a human readable decimal string into the token's smallest unit

    Mirrors ethers parseUnits: negative, non numeric or over-precise values are rejected
    """

    if decimals < 0:
        raise InvalidAmountFormat(f"Invalid decimals: {decimals}")

    if not isinstance(amount, str):
        raise InvalidAmountFormat(f"Amount must be a string, got {type(amount).__name__}")

    value = amount.strip()
    if not AMOUNT_PATTERN.match(value):
        raise InvalidAmountFormat(f"Invalid amount format: {amount!r}")

    whole, _, fraction = value.partition(".")
    fraction = fraction.rstrip("0")

    if len(fraction) > decimals:
        raise InvalidAmountFormat(f"Too many decimals for {amount!r}. Token supports {decimals} decimals")

    return int(whole or "0") * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")


def format_amount(value: int, decimals: int) -> str:
    """ Inverse of parse_amount. Always keeps at least one fractional digit, e.g. 1.0 """

    if decimals < 0:
        raise InvalidAmountFormat(f"Invalid decimals: {decimals}")

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10 ** decimals)

    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""

    return f"{sign}{whole}.{fraction_str or '0'}"
