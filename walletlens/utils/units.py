from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional, Union

EVM_DEFAULT_DECIMALS = 18
SOLANA_NATIVE_DECIMALS = 9

RawAmount = Optional[Union[int, str]]


def parse_raw_amount(value: RawAmount) -> int:
    """
    Parse an upstream integer amount in the smallest unit.

    Accepts ints, decimal integer strings and 0x-prefixed hex strings.
    None and "" are treated as zero.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Invalid raw amount: {value!r}")
    if isinstance(value, int):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            return 0
        try:
            amount = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise ValueError(f"Invalid raw amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Negative raw amount: {value!r}")
    return amount


def normalize(value: RawAmount, decimals: int) -> str:
    """
    Convert a smallest-unit amount into a human readable decimal string.

    normalize("1500000000000000000", 18) -> "1.5"
    """
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")
    amount = parse_raw_amount(value)
    if amount == 0:
        return "0"
    with localcontext() as ctx:
        ctx.prec = len(str(amount)) + decimals + 2
        human = Decimal(amount).scaleb(-decimals).normalize()
    return format(human, "f")


def to_smallest_unit(value: str, decimals: int) -> str:
    """Inverse of normalize. Rejects more fractional digits than the precision allows."""
    if decimals < 0:
        raise ValueError(f"Invalid decimals: {decimals}")
    try:
        human = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid decimal amount: {value!r}")
    if not human.is_finite() or human < 0:
        raise ValueError(f"Invalid decimal amount: {value!r}")
    with localcontext() as ctx:
        ctx.prec = len(human.as_tuple().digits) + decimals + 2
        scaled = human.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{value} has more than {decimals} decimal places")
    return str(int(scaled))
