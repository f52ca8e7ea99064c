import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, ClassVar

from txrep.core.helpers.numeric import best_r


NATIVE_ASSET_CODE = "XLM"

_ASSET_CODE = re.compile(r"^[A-Za-z0-9]{1,12}$")


class MemoType(StrEnum):
    """
    Memo variants. Values are the variant names; the txrep tag is derived
    from them (``text`` -> ``MEMO_TEXT``).
    """
    none = "none"
    text = "text"
    id = "id"
    hash = "hash"
    ret = "return"


class OperationType(StrEnum):
    """
    The closed set of operation kinds the codec understands.
    Values are the camelCase variant names used both for the body tag
    (``PATH_PAYMENT_STRICT_RECEIVE``) and the body sub-key
    (``pathPaymentStrictReceiveOp``).
    """
    create_account = "createAccount"
    payment = "payment"
    path_payment_strict_receive = "pathPaymentStrictReceive"
    manage_sell_offer = "manageSellOffer"
    create_passive_sell_offer = "createPassiveSellOffer"
    set_options = "setOptions"
    change_trust = "changeTrust"
    allow_trust = "allowTrust"
    account_merge = "accountMerge"
    manage_data = "manageData"
    bump_sequence = "bumpSequence"
    manage_buy_offer = "manageBuyOffer"
    path_payment_strict_send = "pathPaymentStrictSend"


class SignerKeyType(StrEnum):
    ed25519_public_key = "ed25519PublicKey"
    pre_auth_tx = "preAuthTx"
    sha256_hash = "sha256Hash"


@dataclass(frozen=True)
class Asset:
    """
    Either the native asset (``code`` is XLM and there is no issuer)
    or an issued asset identified by code and issuer account.
    """
    code: str
    issuer: str | None = None

    @property
    def is_native(self) -> bool:
        return self.code == NATIVE_ASSET_CODE and self.issuer is None

    @classmethod
    def native(cls) -> "Asset":
        return cls(code=NATIVE_ASSET_CODE)

    def to_string(self) -> str:
        if self.is_native:
            return NATIVE_ASSET_CODE
        return f"{self.code}:{self.issuer}"

    @classmethod
    def from_string(cls, text: str) -> "Asset":
        if text == NATIVE_ASSET_CODE:
            return cls.native()

        code, sep, issuer = text.partition(":")
        if not sep or not issuer:
            raise ValueError(f"expected '{NATIVE_ASSET_CODE}' or 'CODE:ISSUER', got {text!r}")
        if not _ASSET_CODE.match(code):
            raise ValueError(f"invalid asset code {code!r}")

        return cls(code=code, issuer=issuer)


@dataclass(frozen=True)
class Price:
    """
    Offer price as a ratio of two signed 32-bit integers.
    Use `from_decimal` to obtain the closest representable ratio
    for a human decimal price.
    """
    n: int
    d: int

    @classmethod
    def from_decimal(cls, value: str | Decimal | int) -> "Price":
        n, d = best_r(value)
        return cls(n=n, d=d)

    def to_decimal(self) -> Decimal:
        return Decimal(self.n) / Decimal(self.d)


@dataclass(frozen=True)
class TimeBounds:
    min_time: int
    """
    Lower bound (unix seconds); 0 means no lower bound.
    """

    max_time: int
    """
    Upper bound (unix seconds); 0 means no upper bound.
    """


@dataclass(frozen=True)
class Memo:
    type: MemoType
    value: str | int | bytes | None = None
    """
    str for text memos, int for id memos, 32 raw bytes for hash and
    return memos, None for the empty memo.
    """

    @classmethod
    def none(cls) -> "Memo":
        return cls(type=MemoType.none)

    @classmethod
    def from_text(cls, text: str) -> "Memo":
        return cls(type=MemoType.text, value=text)

    @classmethod
    def from_id(cls, memo_id: int) -> "Memo":
        return cls(type=MemoType.id, value=memo_id)

    @classmethod
    def from_hash(cls, digest: bytes) -> "Memo":
        return cls(type=MemoType.hash, value=digest)

    @classmethod
    def from_return(cls, digest: bytes) -> "Memo":
        return cls(type=MemoType.ret, value=digest)


@dataclass(frozen=True)
class Signer:
    type: SignerKeyType
    key: str | bytes
    """
    Account address for ed25519 signers, raw 32 bytes for
    pre-authorized transaction and sha256 hash signers.
    """

    weight: int


@dataclass(frozen=True)
class DecoratedSignature:
    hint: bytes
    signature: bytes


@dataclass(frozen=True, kw_only=True)
class Operation:
    """
    Base of the operation sum type. Every concrete operation is a frozen
    dataclass with a class-level TYPE and an optional source account
    overriding the transaction source.
    """
    TYPE: ClassVar[OperationType]

    source_account: str | None = None


@dataclass(frozen=True, kw_only=True)
class CreateAccount(Operation):
    TYPE = OperationType.create_account

    destination: str
    starting_balance: Decimal


@dataclass(frozen=True, kw_only=True)
class Payment(Operation):
    TYPE = OperationType.payment

    destination: str
    asset: Asset
    amount: Decimal


@dataclass(frozen=True, kw_only=True)
class PathPaymentStrictReceive(Operation):
    TYPE = OperationType.path_payment_strict_receive

    send_asset: Asset
    send_max: Decimal
    destination: str
    dest_asset: Asset
    dest_amount: Decimal
    path: tuple[Asset, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, kw_only=True)
class PathPaymentStrictSend(Operation):
    TYPE = OperationType.path_payment_strict_send

    send_asset: Asset
    send_amount: Decimal
    destination: str
    dest_asset: Asset
    dest_min: Decimal
    path: tuple[Asset, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))


@dataclass(frozen=True, kw_only=True)
class ManageSellOffer(Operation):
    TYPE = OperationType.manage_sell_offer

    selling: Asset
    buying: Asset
    amount: Decimal
    price: Price
    offer_id: int = 0


@dataclass(frozen=True, kw_only=True)
class CreatePassiveSellOffer(Operation):
    TYPE = OperationType.create_passive_sell_offer

    selling: Asset
    buying: Asset
    amount: Decimal
    price: Price


@dataclass(frozen=True, kw_only=True)
class SetOptions(Operation):
    TYPE = OperationType.set_options

    inflation_dest: str | None = None
    clear_flags: int | None = None
    set_flags: int | None = None
    master_weight: int | None = None
    low_threshold: int | None = None
    med_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: str | None = None
    signer: Signer | None = None


@dataclass(frozen=True, kw_only=True)
class ChangeTrust(Operation):
    TYPE = OperationType.change_trust

    line: Asset
    limit: Decimal | None = None


@dataclass(frozen=True, kw_only=True)
class AllowTrust(Operation):
    TYPE = OperationType.allow_trust

    trustor: str
    asset_code: str
    authorize: int


@dataclass(frozen=True, kw_only=True)
class AccountMerge(Operation):
    TYPE = OperationType.account_merge

    destination: str


@dataclass(frozen=True, kw_only=True)
class ManageData(Operation):
    TYPE = OperationType.manage_data

    data_name: str
    data_value: bytes | None = None


@dataclass(frozen=True, kw_only=True)
class BumpSequence(Operation):
    TYPE = OperationType.bump_sequence

    bump_to: int


@dataclass(frozen=True, kw_only=True)
class ManageBuyOffer(Operation):
    TYPE = OperationType.manage_buy_offer

    selling: Asset
    buying: Asset
    buy_amount: Decimal
    price: Price
    offer_id: int = 0


@dataclass(frozen=True)
class Transaction:
    """
    A classic (non fee-bump) transaction envelope: the body fields plus
    the decorated signatures attached to it.

    The protocol extension slot is not modelled; it is always 0 on the
    wire and in txrep.
    """
    source_account: str
    fee: int
    seq_num: int
    operations: tuple[Operation, ...] = ()
    memo: Memo = field(default_factory=Memo.none)
    time_bounds: TimeBounds | None = None
    signatures: tuple[DecoratedSignature, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))
        object.__setattr__(self, "signatures", tuple(self.signatures))

    def to_dict(self) -> dict[str, Any]:
        from txrep.core.codec.document import to_document
        return to_document(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        from txrep.core.codec.document import from_document
        return from_document(data)


@dataclass(frozen=True)
class FeeBumpTransaction:
    """
    Fee-bump envelope wrapping an inner transaction. txrep has no body
    mapping for it; it exists so encode can reject it explicitly.
    """
    fee_source: str
    fee: int
    inner_transaction: Transaction
    signatures: tuple[DecoratedSignature, ...] = ()
