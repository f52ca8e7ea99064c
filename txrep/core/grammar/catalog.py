from dataclasses import dataclass
from enum import StrEnum

from txrep.core.helpers.casing import camel_case, upper_snake_case
from txrep.core.models.errors import InvalidEncoding, UnknownOperationKind
from txrep.core.models.transaction import (
    AccountMerge,
    AllowTrust,
    BumpSequence,
    ChangeTrust,
    CreateAccount,
    CreatePassiveSellOffer,
    ManageBuyOffer,
    ManageData,
    ManageSellOffer,
    MemoType,
    Operation,
    OperationType,
    PathPaymentStrictReceive,
    PathPaymentStrictSend,
    Payment,
    SetOptions,
    SignerKeyType,
)


MEMO_TAG_PREFIX = "MEMO_"


class FieldKind(StrEnum):
    """
    How a field value is written to and read from a txrep line.
    PRICE, SIGNER and ASSET_PATH are composite and span several lines.
    """
    ACCOUNT = "account"
    ASSET_CODE = "asset_code"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    AMOUNT = "amount"
    ASSET = "asset"
    STRING = "string"
    OPAQUE = "opaque"
    HASH = "hash"
    PRICE = "price"
    SIGNER = "signer"
    ASSET_PATH = "asset_path"


@dataclass(frozen=True)
class Field:
    name: str
    """
    Key segment on the txrep line, e.g. ``startingBalance``.
    """

    attr: str
    """
    Attribute on the model object, e.g. ``starting_balance``.
    """

    kind: FieldKind

    optional: bool = False
    """
    Optional fields are framed by a ``<key>._present`` line.
    """


@dataclass(frozen=True)
class OperationSchema:
    type: OperationType
    model: type[Operation]
    fields: tuple[Field, ...]
    nested: bool = True
    """
    Nested bodies live under ``body.<type>Op``; accountMerge stores its
    destination directly as the union value, so its fields sit under
    ``body`` itself.
    """

    @property
    def tag(self) -> str:
        return upper_snake_case(self.type)

    def body_prefix(self, operation_prefix: str) -> str:
        if self.nested:
            return f"{operation_prefix}.body.{self.type}Op"
        return f"{operation_prefix}.body"


def _schema(model: type[Operation], *fields: Field, nested: bool = True) -> OperationSchema:
    return OperationSchema(type=model.TYPE, model=model, fields=fields, nested=nested)


K = FieldKind

OPERATION_SCHEMAS: dict[OperationType, OperationSchema] = {
    schema.type: schema
    for schema in (
        _schema(
            CreateAccount,
            Field("destination", "destination", K.ACCOUNT),
            Field("startingBalance", "starting_balance", K.AMOUNT),
        ),
        _schema(
            Payment,
            Field("destination", "destination", K.ACCOUNT),
            Field("asset", "asset", K.ASSET),
            Field("amount", "amount", K.AMOUNT),
        ),
        _schema(
            PathPaymentStrictReceive,
            Field("sendAsset", "send_asset", K.ASSET),
            Field("sendMax", "send_max", K.AMOUNT),
            Field("destination", "destination", K.ACCOUNT),
            Field("destAsset", "dest_asset", K.ASSET),
            Field("destAmount", "dest_amount", K.AMOUNT),
            Field("path", "path", K.ASSET_PATH),
        ),
        _schema(
            PathPaymentStrictSend,
            Field("sendAsset", "send_asset", K.ASSET),
            Field("sendAmount", "send_amount", K.AMOUNT),
            Field("destination", "destination", K.ACCOUNT),
            Field("destAsset", "dest_asset", K.ASSET),
            Field("destMin", "dest_min", K.AMOUNT),
            Field("path", "path", K.ASSET_PATH),
        ),
        _schema(
            ManageSellOffer,
            Field("selling", "selling", K.ASSET),
            Field("buying", "buying", K.ASSET),
            Field("amount", "amount", K.AMOUNT),
            Field("price", "price", K.PRICE),
            Field("offerID", "offer_id", K.INT64),
        ),
        _schema(
            CreatePassiveSellOffer,
            Field("selling", "selling", K.ASSET),
            Field("buying", "buying", K.ASSET),
            Field("amount", "amount", K.AMOUNT),
            Field("price", "price", K.PRICE),
        ),
        _schema(
            SetOptions,
            Field("inflationDest", "inflation_dest", K.ACCOUNT, optional=True),
            Field("clearFlags", "clear_flags", K.UINT32, optional=True),
            Field("setFlags", "set_flags", K.UINT32, optional=True),
            Field("masterWeight", "master_weight", K.UINT32, optional=True),
            Field("lowThreshold", "low_threshold", K.UINT32, optional=True),
            Field("medThreshold", "med_threshold", K.UINT32, optional=True),
            Field("highThreshold", "high_threshold", K.UINT32, optional=True),
            Field("homeDomain", "home_domain", K.STRING, optional=True),
            Field("signer", "signer", K.SIGNER, optional=True),
        ),
        _schema(
            ChangeTrust,
            # TODO: pooled-asset trust lines need their own line kind
            Field("line", "line", K.ASSET),
            Field("limit", "limit", K.AMOUNT, optional=True),
        ),
        _schema(
            AllowTrust,
            Field("trustor", "trustor", K.ACCOUNT),
            Field("asset", "asset_code", K.ASSET_CODE),
            Field("authorize", "authorize", K.UINT32),
        ),
        _schema(
            AccountMerge,
            Field("destination", "destination", K.ACCOUNT),
            nested=False,
        ),
        _schema(
            ManageData,
            Field("dataName", "data_name", K.STRING),
            Field("dataValue", "data_value", K.OPAQUE, optional=True),
        ),
        _schema(
            BumpSequence,
            Field("bumpTo", "bump_to", K.INT64),
        ),
        _schema(
            ManageBuyOffer,
            Field("selling", "selling", K.ASSET),
            Field("buying", "buying", K.ASSET),
            Field("buyAmount", "buy_amount", K.AMOUNT),
            Field("price", "price", K.PRICE),
            Field("offerID", "offer_id", K.INT64),
        ),
    )
}

_SCHEMAS_BY_MODEL: dict[type[Operation], OperationSchema] = {
    schema.model: schema for schema in OPERATION_SCHEMAS.values()
}

MEMO_FIELDS: dict[MemoType, Field | None] = {
    MemoType.none: None,
    MemoType.text: Field("text", "value", K.STRING),
    MemoType.id: Field("id", "value", K.UINT64),
    MemoType.hash: Field("hash", "value", K.HASH),
    MemoType.ret: Field("retHash", "value", K.HASH),
}

MEMO_TEXT_MAX_BYTES = 28

SIGNER_KEY_PREFIXES: dict[str, SignerKeyType] = {
    "G": SignerKeyType.ed25519_public_key,
    "T": SignerKeyType.pre_auth_tx,
    "X": SignerKeyType.sha256_hash,
}


def schema_for(operation: Operation) -> OperationSchema:
    schema = _SCHEMAS_BY_MODEL.get(type(operation))
    if schema is None:
        raise UnknownOperationKind(f"{type(operation).__name__} is not implemented")
    return schema


def schema_for_tag(tag: str, key: str | None = None) -> OperationSchema:
    try:
        operation_type = OperationType(camel_case(tag))
    except ValueError:
        raise UnknownOperationKind(f"unknown operation type {tag!r}", key) from None

    schema = OPERATION_SCHEMAS[operation_type]
    if schema.tag != tag:
        raise UnknownOperationKind(f"unknown operation type {tag!r}, expected {schema.tag}", key)
    return schema


def memo_tag(memo_type: MemoType) -> str:
    return MEMO_TAG_PREFIX + upper_snake_case(memo_type)


def memo_type_for_tag(tag: str, key: str | None = None) -> MemoType:
    if tag.startswith(MEMO_TAG_PREFIX):
        try:
            memo_type = MemoType(camel_case(tag[len(MEMO_TAG_PREFIX):]))
        except ValueError:
            pass
        else:
            if memo_tag(memo_type) == tag:
                return memo_type
    raise InvalidEncoding(f"unknown memo type {tag!r}", key)
