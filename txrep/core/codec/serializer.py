import logging
from datetime import datetime, UTC
from typing import Any

from txrep.core.grammar.catalog import (
    Field,
    FieldKind,
    MEMO_FIELDS,
    MEMO_TEXT_MAX_BYTES,
    memo_tag,
    schema_for,
)
from txrep.core.grammar.framing import LineWriter, item_key
from txrep.core.grammar.values import HINT_SIZE, check_price, render_hex, render_value
from txrep.core.helpers.numeric import format_amount, to_decimal
from txrep.core.models.errors import InvalidEncoding, MissingField, UnsupportedTransactionKind
from txrep.core.models.transaction import (
    DecoratedSignature,
    FeeBumpTransaction,
    Memo,
    Operation,
    Price,
    Signer,
    SignerKeyType,
    TimeBounds,
    Transaction,
)
from txrep.core.ports.address import AddressCodec


class TxrepSerializer:
    """
    Renders a Transaction as txrep: one ``key: value`` line per leaf field,
    in a fixed order, with presence and length framing lines.

    With ``annotate=True`` amounts and timestamps are followed by a human
    readable annotation, e.g. ``123400000 (12.34e7)``. The parser ignores
    annotations, so annotated text decodes to the same transaction.
    """

    def __init__(self, address_codec: AddressCodec, annotate: bool = False) -> None:
        self._address_codec = address_codec
        self._annotate = annotate
        self._logger = logging.getLogger("core.codec.serializer")

    def encode(self, transaction: Transaction | FeeBumpTransaction) -> str:
        if isinstance(transaction, FeeBumpTransaction):
            raise UnsupportedTransactionKind("fee bump transactions have no txrep mapping")
        if not isinstance(transaction, Transaction):
            raise UnsupportedTransactionKind(
                f"cannot encode {type(transaction).__name__} as txrep"
            )

        writer = LineWriter()
        self._scalar(writer, "tx.sourceAccount", FieldKind.ACCOUNT, transaction.source_account)
        self._scalar(writer, "tx.fee", FieldKind.UINT32, transaction.fee)
        self._scalar(writer, "tx.seqNum", FieldKind.INT64, transaction.seq_num)
        self._time_bounds(writer, transaction.time_bounds)
        self._memo(writer, transaction.memo)

        writer.length("tx.operations", len(transaction.operations))
        for i, operation in enumerate(transaction.operations):
            self._operation(writer, item_key("tx.operations", i), operation)

        writer.line("tx.ext.v", 0)
        self._signatures(writer, transaction.signatures)

        self._logger.debug(
            f"Encoded transaction with {len(transaction.operations)} operations "
            f"into {len(writer)} lines"
        )
        return writer.render()

    def _time_bounds(self, writer: LineWriter, time_bounds: TimeBounds | None) -> None:
        if not writer.present("tx.timeBounds", time_bounds is not None):
            return
        self._timestamp(writer, "tx.timeBounds.minTime", time_bounds.min_time)
        self._timestamp(writer, "tx.timeBounds.maxTime", time_bounds.max_time)

    def _timestamp(self, writer: LineWriter, key: str, value: int) -> None:
        text = render_value(FieldKind.UINT64, value, key)
        if self._annotate and value:
            try:
                moment = datetime.fromtimestamp(value, tz=UTC)
            except (OverflowError, OSError, ValueError):
                moment = None
            if moment is not None:
                text = f"{text} ({moment.strftime('%Y-%m-%dT%H:%M:%SZ')})"
        writer.line(key, text)

    def _memo(self, writer: LineWriter, memo: Memo) -> None:
        writer.line("tx.memo.type", memo_tag(memo.type))
        field = MEMO_FIELDS[memo.type]
        if field is None:
            return

        key = f"tx.memo.{field.name}"
        if field.kind is FieldKind.STRING:
            size = len(str(memo.value).encode("utf-8"))
            if size > MEMO_TEXT_MAX_BYTES:
                raise InvalidEncoding(
                    f"memo text is {size} bytes, at most {MEMO_TEXT_MAX_BYTES} allowed", key
                )
        self._scalar(writer, key, field.kind, memo.value)

    def _operation(self, writer: LineWriter, prefix: str, operation: Operation) -> None:
        schema = schema_for(operation)

        source_key = f"{prefix}.sourceAccount"
        if writer.present(source_key, operation.source_account is not None):
            self._scalar(writer, source_key, FieldKind.ACCOUNT, operation.source_account)

        writer.line(f"{prefix}.body.type", schema.tag)
        self._fields(writer, schema.body_prefix(prefix), schema.fields, operation)

    def _fields(
        self,
        writer: LineWriter,
        prefix: str,
        fields: tuple[Field, ...],
        obj: Any
    ) -> None:
        for field in fields:
            key = f"{prefix}.{field.name}"
            value = getattr(obj, field.attr)

            if field.optional:
                if not writer.present(key, value is not None):
                    continue
            elif value is None:
                raise MissingField(f"{type(obj).__name__}.{field.attr} is required", key)

            match field.kind:
                case FieldKind.PRICE:
                    self._price(writer, key, value)
                case FieldKind.SIGNER:
                    self._signer(writer, key, value)
                case FieldKind.ASSET_PATH:
                    writer.length(key, len(value))
                    for i, asset in enumerate(value):
                        self._scalar(writer, item_key(key, i), FieldKind.ASSET, asset)
                case _:
                    self._scalar(writer, key, field.kind, value)

    def _price(self, writer: LineWriter, key: str, price: Any) -> None:
        if not isinstance(price, Price):
            price = Price.from_decimal(price)
        check_price(price.n, price.d, key)
        writer.line(f"{key}.n", price.n)
        writer.line(f"{key}.d", price.d)

    def _signer(self, writer: LineWriter, key: str, signer: Signer) -> None:
        key_key = f"{key}.key"
        try:
            match signer.type:
                case SignerKeyType.ed25519_public_key:
                    address = signer.key
                case SignerKeyType.pre_auth_tx:
                    address = self._address_codec.encode_pre_auth_tx(signer.key)
                case SignerKeyType.sha256_hash:
                    address = self._address_codec.encode_sha256_hash(signer.key)
                case _:
                    raise ValueError(f"unknown signer key type {signer.type!r}")
        except ValueError as ex:
            raise InvalidEncoding(str(ex), key_key) from ex

        writer.line(key_key, address)
        self._scalar(writer, f"{key}.weight", FieldKind.UINT32, signer.weight)

    def _signatures(self, writer: LineWriter, signatures: tuple[DecoratedSignature, ...]) -> None:
        writer.length("signatures", len(signatures))
        for i, signature in enumerate(signatures):
            prefix = item_key("signatures", i)
            hint_key = f"{prefix}.hint"
            writer.line(hint_key, render_hex(signature.hint, hint_key, size=HINT_SIZE))
            self._scalar(writer, f"{prefix}.signature", FieldKind.OPAQUE, signature.signature)

    def _scalar(self, writer: LineWriter, key: str, kind: FieldKind, value: Any) -> None:
        if value is None:
            raise MissingField("required value is missing", key)

        text = render_value(kind, value, key)
        if self._annotate and kind is FieldKind.AMOUNT:
            text = f"{text} ({format_amount(to_decimal(value, key))}e7)"
        writer.line(key, text)
