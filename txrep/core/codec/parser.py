import logging
from typing import Any

from txrep.core.grammar.catalog import (
    Field,
    FieldKind,
    MEMO_FIELDS,
    MEMO_TEXT_MAX_BYTES,
    SIGNER_KEY_PREFIXES,
    memo_type_for_tag,
    schema_for_tag,
)
from txrep.core.grammar.framing import LineReader, item_key, token
from txrep.core.grammar.values import HINT_SIZE, check_price, parse_hex, parse_int32, parse_value
from txrep.core.models.errors import (
    InvalidEncoding,
    UnsupportedTransactionKind,
)
from txrep.core.models.transaction import (
    DecoratedSignature,
    Memo,
    Operation,
    Price,
    Signer,
    SignerKeyType,
    TimeBounds,
    Transaction,
)
from txrep.core.ports.address import AddressCodec


class TxrepParser:
    """
    Rebuilds a Transaction from txrep text.

    Parsing runs in two passes: the text is first tokenized into an
    ordered key/value map (`LineReader`), then the expected schema is
    walked top-down, pulling each required key. Presence lines decide
    whether a value key is expected, length lines decide how many indexed
    children to read. Keys left over at the end are rejected.

    Decoding is all-or-nothing: any violation raises a `TxrepError`
    subclass carrying the offending key.
    """

    def __init__(self, address_codec: AddressCodec) -> None:
        self._address_codec = address_codec
        self._logger = logging.getLogger("core.codec.parser")

    def decode(self, text: str) -> Transaction:
        reader = LineReader.from_text(text)

        source_account = self._source_account(reader, "tx.sourceAccount")
        fee = self._scalar(reader, "tx.fee", FieldKind.UINT32)
        seq_num = self._scalar(reader, "tx.seqNum", FieldKind.INT64)
        time_bounds = self._time_bounds(reader)
        memo = self._memo(reader)

        count = reader.length("tx.operations")
        operations = tuple(
            self._operation(reader, item_key("tx.operations", i)) for i in range(count)
        )

        ext = self._scalar(reader, "tx.ext.v", FieldKind.UINT32)
        if ext != 0:
            raise UnsupportedTransactionKind(f"extension version {ext} is not supported", "tx.ext.v")

        signatures = self._signatures(reader)
        reader.finish()

        self._logger.debug(
            f"Decoded transaction with {len(operations)} operations from {len(reader)} lines"
        )
        return Transaction(
            source_account=source_account,
            fee=fee,
            seq_num=seq_num,
            time_bounds=time_bounds,
            memo=memo,
            operations=operations,
            signatures=signatures,
        )

    def _time_bounds(self, reader: LineReader) -> TimeBounds | None:
        if not reader.present("tx.timeBounds"):
            return None
        return TimeBounds(
            min_time=self._scalar(reader, "tx.timeBounds.minTime", FieldKind.UINT64),
            max_time=self._scalar(reader, "tx.timeBounds.maxTime", FieldKind.UINT64),
        )

    def _memo(self, reader: LineReader) -> Memo:
        memo_type = memo_type_for_tag(token(reader.raw("tx.memo.type")), "tx.memo.type")
        field = MEMO_FIELDS[memo_type]
        if field is None:
            return Memo(type=memo_type)

        key = f"tx.memo.{field.name}"
        value = self._scalar(reader, key, field.kind)
        if field.kind is FieldKind.STRING and len(value.encode("utf-8")) > MEMO_TEXT_MAX_BYTES:
            raise InvalidEncoding(f"memo text exceeds {MEMO_TEXT_MAX_BYTES} bytes", key)

        return Memo(type=memo_type, value=value)

    def _operation(self, reader: LineReader, prefix: str) -> Operation:
        source_account = None
        source_key = f"{prefix}.sourceAccount"
        if reader.present(source_key):
            source_account = self._source_account(reader, source_key)

        type_key = f"{prefix}.body.type"
        schema = schema_for_tag(token(reader.raw(type_key)), type_key)
        values = self._fields(reader, schema.body_prefix(prefix), schema.fields)

        return schema.model(source_account=source_account, **values)

    def _fields(
        self,
        reader: LineReader,
        prefix: str,
        fields: tuple[Field, ...]
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}

        for field in fields:
            key = f"{prefix}.{field.name}"

            if field.optional and not reader.present(key):
                values[field.attr] = None
                continue

            match field.kind:
                case FieldKind.PRICE:
                    values[field.attr] = self._price(reader, key)
                case FieldKind.SIGNER:
                    values[field.attr] = self._signer(reader, key)
                case FieldKind.ASSET_PATH:
                    count = reader.length(key)
                    values[field.attr] = tuple(
                        self._scalar(reader, item_key(key, i), FieldKind.ASSET)
                        for i in range(count)
                    )
                case _:
                    values[field.attr] = self._scalar(reader, key, field.kind)

        return values

    def _price(self, reader: LineReader, key: str) -> Price:
        n_key, d_key = f"{key}.n", f"{key}.d"
        n = parse_int32(reader.raw(n_key), n_key)
        d = parse_int32(reader.raw(d_key), d_key)
        check_price(n, d, key)
        return Price(n=n, d=d)

    def _signer(self, reader: LineReader, key: str) -> Signer:
        key_key = f"{key}.key"
        address = token(reader.raw(key_key))
        signer_type = SIGNER_KEY_PREFIXES.get(address[:1])

        try:
            match signer_type:
                case SignerKeyType.ed25519_public_key:
                    if not self._address_codec.is_valid_account(address):
                        raise ValueError(f"invalid ed25519 public key {address!r}")
                    signer_key = address
                case SignerKeyType.pre_auth_tx:
                    signer_key = self._address_codec.decode_pre_auth_tx(address)
                case SignerKeyType.sha256_hash:
                    signer_key = self._address_codec.decode_sha256_hash(address)
                case _:
                    raise ValueError(f"unrecognized signer key {address!r}")
        except ValueError as ex:
            raise InvalidEncoding(str(ex), key_key) from ex

        weight = self._scalar(reader, f"{key}.weight", FieldKind.UINT32)
        return Signer(type=signer_type, key=signer_key, weight=weight)

    def _signatures(self, reader: LineReader) -> tuple[DecoratedSignature, ...]:
        signatures = []
        for i in range(reader.length("signatures")):
            prefix = item_key("signatures", i)
            hint_key = f"{prefix}.hint"
            hint = parse_hex(reader.raw(hint_key), hint_key, size=HINT_SIZE)
            signature = self._scalar(reader, f"{prefix}.signature", FieldKind.OPAQUE)
            signatures.append(DecoratedSignature(hint=hint, signature=signature))
        return tuple(signatures)

    def _source_account(self, reader: LineReader, key: str) -> str:
        address = self._scalar(reader, key, FieldKind.ACCOUNT)
        if not self._address_codec.is_valid_account(address):
            raise InvalidEncoding(f"invalid account id {address!r}", key)
        return address

    @staticmethod
    def _scalar(reader: LineReader, key: str, kind: FieldKind) -> Any:
        return parse_value(kind, reader.raw(key), key)
