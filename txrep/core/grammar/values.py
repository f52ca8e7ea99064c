import json
import re
from decimal import Decimal
from typing import Any

from txrep.core.grammar.catalog import FieldKind
from txrep.core.grammar.framing import token
from txrep.core.helpers.numeric import (
    INT32,
    INT64,
    UINT32,
    UINT64,
    check_range,
    from_stroops,
    parse_integer,
    to_stroops,
)
from txrep.core.models.errors import InvalidEncoding, InvalidNumeric
from txrep.core.models.transaction import Asset


HASH_SIZE = 32
HINT_SIZE = 4

_ASSET_CODE = re.compile(r"^[A-Za-z0-9]{1,12}$")
_DECODER = json.JSONDecoder()

INTEGER_BOUNDS: dict[FieldKind, tuple[int, int]] = {
    FieldKind.UINT32: UINT32,
    FieldKind.INT64: INT64,
    FieldKind.UINT64: UINT64,
}


def render_value(kind: FieldKind, value: Any, key: str) -> str:
    """Render a single-line value of `kind` as it appears after ``key: ``."""
    match kind:
        case FieldKind.ACCOUNT | FieldKind.ASSET_CODE:
            return str(value)
        case FieldKind.UINT32 | FieldKind.INT64 | FieldKind.UINT64:
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidNumeric(f"expected an integer, got {value!r}", key)
            return str(check_range(value, INTEGER_BOUNDS[kind], key))
        case FieldKind.AMOUNT:
            return str(to_stroops(value, key))
        case FieldKind.ASSET:
            return value.to_string()
        case FieldKind.STRING:
            return render_string(value)
        case FieldKind.OPAQUE:
            return render_hex(value, key)
        case FieldKind.HASH:
            return render_hex(value, key, size=HASH_SIZE)
        case _:
            raise TypeError(f"{kind} is not a single-line field kind")


def parse_value(kind: FieldKind, raw: str, key: str) -> Any:
    match kind:
        case FieldKind.ACCOUNT:
            text = token(raw)
            if not text:
                raise InvalidEncoding("empty account id", key)
            return text
        case FieldKind.ASSET_CODE:
            text = token(raw)
            if not _ASSET_CODE.match(text):
                raise InvalidEncoding(f"invalid asset code {text!r}", key)
            return text
        case FieldKind.UINT32 | FieldKind.INT64 | FieldKind.UINT64:
            return parse_int(raw, INTEGER_BOUNDS[kind], key)
        case FieldKind.AMOUNT:
            return parse_amount(raw, key)
        case FieldKind.ASSET:
            try:
                return Asset.from_string(token(raw))
            except ValueError as ex:
                raise InvalidEncoding(str(ex), key) from ex
        case FieldKind.STRING:
            return parse_string(raw, key)
        case FieldKind.OPAQUE:
            return parse_hex(raw, key)
        case FieldKind.HASH:
            return parse_hex(raw, key, size=HASH_SIZE)
        case _:
            raise TypeError(f"{kind} is not a single-line field kind")


def parse_int(raw: str, bounds: tuple[int, int], key: str) -> int:
    return parse_integer(token(raw), bounds, key)


def parse_int32(raw: str, key: str) -> int:
    return parse_int(raw, INT32, key)


def check_price(n: int, d: int, key: str) -> None:
    """Price parts are int32 with n >= 0 and d > 0, in both directions."""
    n_key, d_key = f"{key}.n", f"{key}.d"
    for value, part_key in ((n, n_key), (d, d_key)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidNumeric(f"expected an integer, got {value!r}", part_key)
        check_range(value, INT32, part_key)

    if n < 0:
        raise InvalidNumeric("price numerator must be non-negative", n_key)
    if d <= 0:
        raise InvalidNumeric("price denominator must be positive", d_key)


def parse_amount(raw: str, key: str) -> Decimal:
    return from_stroops(parse_int(raw, INT64, key), key)


def render_string(value: str) -> str:
    return json.dumps(value)


def parse_string(raw: str, key: str) -> str:
    """
    Read a JSON-quoted string from the start of `raw`. Anything after the
    closing quote is annotation.
    """
    if not raw.startswith('"'):
        raise InvalidEncoding("expected a double-quoted string", key)
    try:
        value, _ = _DECODER.raw_decode(raw)
    except json.JSONDecodeError as ex:
        raise InvalidEncoding(f"invalid quoted string: {ex.msg}", key) from ex
    return value


def render_hex(value: bytes, key: str, size: int | None = None) -> str:
    data = bytes(value)
    if size is not None and len(data) != size:
        raise InvalidEncoding(f"expected {size} bytes, got {len(data)}", key)
    return data.hex()


def parse_hex(raw: str, key: str, size: int | None = None) -> bytes:
    text = token(raw)
    try:
        data = bytes.fromhex(text)
    except ValueError as ex:
        raise InvalidEncoding(f"invalid hex {text!r}", key) from ex

    if size is not None and len(data) != size:
        raise InvalidEncoding(f"expected {size} bytes, got {len(data)}", key)

    return data
