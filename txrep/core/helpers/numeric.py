import re
from decimal import Decimal, InvalidOperation, localcontext
from fractions import Fraction

from txrep.core.models.errors import InvalidNumeric


INT32 = (-(1 << 31), (1 << 31) - 1)
UINT32 = (0, (1 << 32) - 1)
INT64 = (-(1 << 63), (1 << 63) - 1)
UINT64 = (0, (1 << 64) - 1)

AMOUNT_DIGITS = 7
STROOPS_PER_UNIT = 10 ** AMOUNT_DIGITS
AMOUNT_RANGE = (0, INT64[1])

PRICE_BOUND = INT32[1]

# Wider than any 64-bit value, so longer tokens are out of range before int().
MAX_INTEGER_DIGITS = 20

_INTEGER = re.compile(r"^-?\d+$")


def check_range(value: int, bounds: tuple[int, int], key: str | None = None) -> int:
    low, high = bounds
    if not low <= value <= high:
        raise InvalidNumeric(f"{value} is outside [{low}, {high}]", key)
    return value


def parse_integer(text: str, bounds: tuple[int, int], key: str | None = None) -> int:
    if not _INTEGER.match(text):
        raise InvalidNumeric(f"expected an integer, got {text!r}", key)
    sign, digits = ("-", text[1:]) if text.startswith("-") else ("", text)
    digits = digits.lstrip("0") or "0"
    if len(digits) > MAX_INTEGER_DIGITS:
        low, high = bounds
        raise InvalidNumeric(f"{sign}{digits[:24]}... is outside [{low}, {high}]", key)
    return check_range(int(sign + digits), bounds, key)


def to_decimal(value: str | Decimal | int, key: str | None = None) -> Decimal:
    """
    Exact conversion to Decimal. Floats are refused since they already
    carry binary rounding error.
    """
    if isinstance(value, (bool, float)):
        raise InvalidNumeric(f"expected a decimal string, got {type(value).__name__}", key)

    try:
        number = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError) as ex:
        raise InvalidNumeric(f"not a decimal number: {value!r}", key) from ex

    if not number.is_finite():
        raise InvalidNumeric(f"not a finite number: {value!r}", key)

    return number


def to_stroops(amount: str | Decimal | int, key: str | None = None) -> int:
    """
    Scale a whole-unit amount to its 7-digit fixed-point wire value:
    ``"12.34"`` -> ``123400000``.
    """
    value = to_decimal(amount, key)

    with localcontext() as ctx:
        ctx.prec = max(64, len(value.as_tuple().digits) + AMOUNT_DIGITS + 1)
        scaled = value.scaleb(AMOUNT_DIGITS)

    low, high = AMOUNT_RANGE
    if not low <= scaled <= high:
        raise InvalidNumeric(f"amount {amount} is outside [{low}, {high}] stroops", key)

    if scaled != scaled.to_integral_value():
        raise InvalidNumeric(
            f"amount {amount} has more than {AMOUNT_DIGITS} fractional digits", key
        )

    return check_range(int(scaled), AMOUNT_RANGE, key)


def from_stroops(stroops: int, key: str | None = None) -> Decimal:
    check_range(stroops, AMOUNT_RANGE, key)
    return Decimal(format_amount(Decimal(stroops).scaleb(-AMOUNT_DIGITS)))


def format_amount(amount: Decimal) -> str:
    """Plain notation without trailing fractional zeros: 12.3400000 -> 12.34"""
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def best_r(value: str | Decimal | int, key: str | None = None) -> tuple[int, int]:
    """
    Closest fraction n/d to ``value`` with 0 <= n <= 2**31-1 and
    0 < d <= 2**31-1.

    The continued-fraction expansion of the (exact) value walks the
    Stern-Brocot path towards it. Once the next convergent would leave the
    bound, the best candidates are the last convergent and the largest
    semiconvergent (mediant step) that still fits; the closer of the two
    wins, ties going to the convergent.
    """
    number = to_decimal(value, key)
    if number < 0:
        raise InvalidNumeric(f"price must be non-negative, got {value}", key)

    target = Fraction(number)
    if target > PRICE_BOUND:
        raise InvalidNumeric(f"price {value} exceeds {PRICE_BOUND}", key)

    if target.numerator <= PRICE_BOUND and target.denominator <= PRICE_BOUND:
        return target.numerator, target.denominator

    p0, q0, p1, q1 = 0, 1, 1, 0
    n, d = target.numerator, target.denominator
    while True:
        a = n // d
        p2 = p0 + a * p1
        q2 = q0 + a * q1
        if p2 > PRICE_BOUND or q2 > PRICE_BOUND:
            break
        p0, q0, p1, q1 = p1, q1, p2, q2
        n, d = d, n - a * d

    best = Fraction(p1, q1)

    k = (PRICE_BOUND - q0) // q1
    if p1:
        k = min(k, (PRICE_BOUND - p0) // p1)

    if k > 0:
        semi = Fraction(p0 + k * p1, q0 + k * q1)
        if abs(semi - target) < abs(best - target):
            best = semi

    return best.numerator, best.denominator
