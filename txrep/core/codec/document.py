"""
Plain-data form of a Transaction (dicts, lists, strings, ints) for YAML or
JSON files. Operation fields are converted with the same grammar catalog
the txrep codec uses, keyed by model attribute name.
"""
from decimal import Decimal
from typing import Any

from txrep.core.grammar.catalog import (
    Field,
    FieldKind,
    MEMO_FIELDS,
    OPERATION_SCHEMAS,
    schema_for,
)
from txrep.core.helpers.numeric import format_amount, parse_integer, to_decimal
from txrep.core.models.errors import (
    InvalidEncoding,
    InvalidNumeric,
    MissingField,
    UnknownOperationKind,
)
from txrep.core.models.transaction import (
    Asset,
    DecoratedSignature,
    Memo,
    MemoType,
    Operation,
    OperationType,
    Price,
    Signer,
    SignerKeyType,
    TimeBounds,
    Transaction,
)


def to_document(transaction: Transaction) -> dict[str, Any]:
    time_bounds = transaction.time_bounds
    return {
        "source_account": transaction.source_account,
        "fee": transaction.fee,
        "seq_num": transaction.seq_num,
        "time_bounds": None if time_bounds is None else {
            "min_time": time_bounds.min_time,
            "max_time": time_bounds.max_time,
        },
        "memo": _memo_to_document(transaction.memo),
        "operations": [_operation_to_document(op) for op in transaction.operations],
        "signatures": [
            {"hint": sig.hint.hex(), "signature": sig.signature.hex()}
            for sig in transaction.signatures
        ],
    }


def from_document(data: dict[str, Any]) -> Transaction:
    data = _mapping(data, "transaction")
    time_bounds = data.get("time_bounds")
    if time_bounds is not None:
        time_bounds = _mapping(time_bounds, "time_bounds")
        time_bounds = TimeBounds(
            min_time=_int(_require(time_bounds, "min_time", "time_bounds"), "time_bounds.min_time"),
            max_time=_int(_require(time_bounds, "max_time", "time_bounds"), "time_bounds.max_time"),
        )

    return Transaction(
        source_account=_require(data, "source_account", "transaction"),
        fee=_int(_require(data, "fee", "transaction"), "transaction.fee"),
        seq_num=_int(_require(data, "seq_num", "transaction"), "transaction.seq_num"),
        time_bounds=time_bounds,
        memo=_memo_from_document(data.get("memo")),
        operations=tuple(
            _operation_from_document(op, f"operations[{i}]")
            for i, op in enumerate(_sequence(data.get("operations"), "operations"))
        ),
        signatures=tuple(
            _signature_from_document(sig, f"signatures[{i}]")
            for i, sig in enumerate(_sequence(data.get("signatures"), "signatures"))
        ),
    )


def _memo_to_document(memo: Memo) -> dict[str, Any]:
    value = memo.value
    if isinstance(value, bytes):
        value = value.hex()
    return {"type": str(memo.type), "value": value}


def _memo_from_document(data: dict[str, Any] | None) -> Memo:
    if data is None:
        return Memo.none()

    data = _mapping(data, "memo")
    try:
        memo_type = MemoType(data.get("type", "none"))
    except ValueError:
        raise InvalidEncoding(f"unknown memo type {data.get('type')!r}", "memo.type") from None

    field = MEMO_FIELDS[memo_type]
    if field is None:
        return Memo(type=memo_type)

    value = _require(data, "value", "memo")
    return Memo(type=memo_type, value=_value_from_document(field.kind, value, "memo.value"))


def _operation_to_document(operation: Operation) -> dict[str, Any]:
    schema = schema_for(operation)
    doc: dict[str, Any] = {"type": str(schema.type), "source_account": operation.source_account}
    for field in schema.fields:
        value = getattr(operation, field.attr)
        doc[field.attr] = None if value is None else _value_to_document(field.kind, value)
    return doc


def _operation_from_document(data: dict[str, Any], path: str) -> Operation:
    data = _mapping(data, path)
    kind = _require(data, "type", path)
    try:
        schema = OPERATION_SCHEMAS[OperationType(kind)]
    except ValueError:
        raise UnknownOperationKind(f"unknown operation type {kind!r}", f"{path}.type") from None

    values = {
        field.attr: _field_from_document(field, data, path) for field in schema.fields
    }
    return schema.model(source_account=data.get("source_account"), **values)


def _field_from_document(field: Field, data: dict[str, Any], path: str) -> Any:
    key = f"{path}.{field.attr}"
    value = data.get(field.attr)
    if value is None:
        if field.optional:
            return None
        if field.kind is FieldKind.ASSET_PATH:
            return ()
        raise MissingField("required value is missing", key)
    return _value_from_document(field.kind, value, key)


def _value_to_document(kind: FieldKind, value: Any) -> Any:
    match kind:
        case FieldKind.AMOUNT:
            return format_amount(Decimal(value))
        case FieldKind.ASSET:
            return value.to_string()
        case FieldKind.ASSET_PATH:
            return [asset.to_string() for asset in value]
        case FieldKind.PRICE:
            price = value if isinstance(value, Price) else Price.from_decimal(value)
            return {"n": price.n, "d": price.d}
        case FieldKind.SIGNER:
            key = value.key
            return {
                "type": str(value.type),
                "key": key.hex() if isinstance(key, bytes) else key,
                "weight": value.weight,
            }
        case FieldKind.OPAQUE | FieldKind.HASH:
            return value.hex()
        case _:
            return value


def _value_from_document(kind: FieldKind, value: Any, key: str) -> Any:
    match kind:
        case FieldKind.AMOUNT:
            return to_decimal(str(value) if isinstance(value, float) else value, key)
        case FieldKind.ASSET:
            return _asset(value, key)
        case FieldKind.ASSET_PATH:
            return tuple(_asset(item, f"{key}[{i}]") for i, item in enumerate(_sequence(value, key)))
        case FieldKind.PRICE:
            if isinstance(value, dict):
                return Price(
                    n=_int(_require(value, "n", key), f"{key}.n"),
                    d=_int(_require(value, "d", key), f"{key}.d"),
                )
            try:
                return Price.from_decimal(str(value) if isinstance(value, float) else value)
            except InvalidNumeric as ex:
                raise InvalidNumeric(ex.message, key) from ex
        case FieldKind.SIGNER:
            return _signer(value, key)
        case FieldKind.OPAQUE | FieldKind.HASH:
            return _hex(value, key)
        case FieldKind.UINT32 | FieldKind.INT64 | FieldKind.UINT64:
            return _int(value, key)
        case _:
            return str(value)


def _signer(data: dict[str, Any], key: str) -> Signer:
    data = _mapping(data, key)
    try:
        signer_type = SignerKeyType(_require(data, "type", key))
    except ValueError:
        raise InvalidEncoding(f"unknown signer type {data.get('type')!r}", f"{key}.type") from None

    signer_key = _require(data, "key", key)
    if signer_type is not SignerKeyType.ed25519_public_key:
        signer_key = _hex(signer_key, f"{key}.key")

    return Signer(
        type=signer_type,
        key=signer_key,
        weight=_int(_require(data, "weight", key), f"{key}.weight"),
    )


def _asset(value: str, key: str) -> Asset:
    try:
        return Asset.from_string(str(value))
    except ValueError as ex:
        raise InvalidEncoding(str(ex), key) from ex


def _hex(value: str, key: str) -> bytes:
    try:
        return bytes.fromhex(str(value))
    except ValueError as ex:
        raise InvalidEncoding(f"invalid hex {value!r}", key) from ex


def _require(data: dict[str, Any], name: str, path: str) -> Any:
    if not isinstance(data, dict) or name not in data:
        raise MissingField("required value is missing", f"{path}.{name}")
    return data[name]


def _signature_from_document(data: dict[str, Any], path: str) -> DecoratedSignature:
    data = _mapping(data, path)
    return DecoratedSignature(
        hint=_hex(_require(data, "hint", path), f"{path}.hint"),
        signature=_hex(_require(data, "signature", path), f"{path}.signature"),
    )


def _mapping(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidEncoding(f"expected a mapping, got {type(value).__name__}", path)
    return value


def _sequence(value: Any, path: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidEncoding(f"expected a list, got {type(value).__name__}", path)
    return value


def _int(value: Any, key: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return parse_integer(value.strip(), (-(1 << 64), 1 << 64), key)
    raise InvalidNumeric(f"expected an integer, got {value!r}", key)
