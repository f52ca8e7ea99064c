from decimal import Decimal

import pytest

from tests.utils import (
    CREATE_ACCOUNT_TXREP,
    DESTINATION,
    PAYER,
    SOURCE,
    USD,
    XLM,
    make_create_account_tx,
    make_signed_tx,
)
from txrep.core.codec.serializer import TxrepSerializer
from txrep.core.models.errors import (
    InvalidEncoding,
    InvalidNumeric,
    MissingField,
    UnknownOperationKind,
    UnsupportedTransactionKind,
)
from txrep.core.models.transaction import (
    AccountMerge,
    ChangeTrust,
    CreateAccount,
    DecoratedSignature,
    FeeBumpTransaction,
    ManageData,
    ManageSellOffer,
    Memo,
    Operation,
    PathPaymentStrictReceive,
    Payment,
    Price,
    SetOptions,
    Signer,
    SignerKeyType,
    TimeBounds,
    Transaction,
)


def _lines(text: str) -> list[str]:
    return text.split("\n")


@pytest.mark.ut
def test_encode_create_account(serializer):
    assert serializer.encode(make_create_account_tx()) == CREATE_ACCOUNT_TXREP


@pytest.mark.ut
def test_encode_without_time_bounds(serializer):
    tx = Transaction(source_account=SOURCE, fee=100, seq_num=1)
    lines = _lines(serializer.encode(tx))

    assert lines == [
        f"tx.sourceAccount: {SOURCE}",
        "tx.fee: 100",
        "tx.seqNum: 1",
        "tx.timeBounds._present: false",
        "tx.memo.type: MEMO_NONE",
        "tx.operations.len: 0",
        "tx.ext.v: 0",
        "signatures.len: 0",
    ]


@pytest.mark.ut
@pytest.mark.parametrize(
    "memo, expected",
    [
        (Memo.from_text("Enjoy this transaction"), ['tx.memo.type: MEMO_TEXT', 'tx.memo.text: "Enjoy this transaction"']),
        (Memo.from_text('say "hi"\n'), ['tx.memo.type: MEMO_TEXT', 'tx.memo.text: "say \\"hi\\"\\n"']),
        (Memo.from_id(18446744073709551615), ["tx.memo.type: MEMO_ID", "tx.memo.id: 18446744073709551615"]),
        (Memo.from_hash(b"\xab" * 32), ["tx.memo.type: MEMO_HASH", f"tx.memo.hash: {'ab' * 32}"]),
        (Memo.from_return(b"\x01" * 32), ["tx.memo.type: MEMO_RETURN", f"tx.memo.retHash: {'01' * 32}"]),
    ],
)
def test_encode_memo(serializer, memo, expected):
    tx = Transaction(source_account=SOURCE, fee=100, seq_num=1, memo=memo)
    lines = _lines(serializer.encode(tx))
    start = lines.index(expected[0])
    assert lines[start:start + len(expected)] == expected


@pytest.mark.ut
def test_encode_memo_text_too_long(serializer):
    tx = Transaction(source_account=SOURCE, fee=100, seq_num=1, memo=Memo.from_text("é" * 15))
    with pytest.raises(InvalidEncoding) as exc:
        serializer.encode(tx)
    assert exc.value.key == "tx.memo.text"


@pytest.mark.ut
def test_encode_account_merge_sits_directly_under_body(serializer):
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[AccountMerge(destination=DESTINATION)],
    )
    lines = _lines(serializer.encode(tx))

    assert "tx.operations[0].sourceAccount._present: false" in lines
    assert "tx.operations[0].body.type: ACCOUNT_MERGE" in lines
    assert f"tx.operations[0].body.destination: {DESTINATION}" in lines
    assert not any("accountMergeOp" in line for line in lines)


@pytest.mark.ut
def test_encode_path_and_price(serializer):
    tx = Transaction(
        source_account=SOURCE,
        fee=200,
        seq_num=1,
        operations=[
            PathPaymentStrictReceive(
                send_asset=XLM,
                send_max=Decimal("10"),
                destination=DESTINATION,
                dest_asset=USD,
                dest_amount=Decimal("1"),
                path=[USD],
            ),
            ManageSellOffer(selling=XLM, buying=USD, amount=Decimal("2"), price=Decimal("1.5")),
        ],
    )
    lines = _lines(serializer.encode(tx))

    body = "tx.operations[0].body.pathPaymentStrictReceiveOp"
    assert lines[lines.index(f"{body}.sendAsset: XLM"):lines.index(f"{body}.path[0]: {USD.to_string()}") + 1] == [
        f"{body}.sendAsset: XLM",
        f"{body}.sendMax: 100000000",
        f"{body}.destination: {DESTINATION}",
        f"{body}.destAsset: {USD.to_string()}",
        f"{body}.destAmount: 10000000",
        f"{body}.path.len: 1",
        f"{body}.path[0]: {USD.to_string()}",
    ]

    offer = "tx.operations[1].body.manageSellOfferOp"
    assert f"{offer}.price.n: 3" in lines
    assert f"{offer}.price.d: 2" in lines
    assert f"{offer}.offerID: 0" in lines


@pytest.mark.ut
def test_encode_set_options_presence(serializer, address_codec):
    key = bytes(range(32))
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[
            SetOptions(
                master_weight=10,
                home_domain="stellar.org",
                signer=Signer(type=SignerKeyType.pre_auth_tx, key=key, weight=5),
            )
        ],
    )
    lines = _lines(serializer.encode(tx))
    body = "tx.operations[0].body.setOptionsOp"

    assert f"{body}.inflationDest._present: false" in lines
    assert f"{body}.masterWeight._present: true" in lines
    assert f"{body}.masterWeight: 10" in lines
    assert f'{body}.homeDomain: "stellar.org"' in lines
    assert f"{body}.signer._present: true" in lines
    assert f"{body}.signer.key: {address_codec.encode_pre_auth_tx(key)}" in lines
    assert f"{body}.signer.weight: 5" in lines


@pytest.mark.ut
def test_encode_optional_values(serializer):
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[
            ChangeTrust(line=USD),
            ManageData(data_name="key", data_value=b"\x00\xff"),
        ],
    )
    lines = _lines(serializer.encode(tx))

    assert "tx.operations[0].body.changeTrustOp.limit._present: false" in lines
    assert 'tx.operations[1].body.manageDataOp.dataName: "key"' in lines
    assert "tx.operations[1].body.manageDataOp.dataValue._present: true" in lines
    assert "tx.operations[1].body.manageDataOp.dataValue: 00ff" in lines


@pytest.mark.ut
def test_encode_signatures(serializer):
    lines = _lines(serializer.encode(make_signed_tx()))

    assert lines[-3:] == [
        "signatures.len: 1",
        "signatures[0].hint: 4aa07ed0",
        f"signatures[0].signature: {bytes(range(64)).hex()}",
    ]


@pytest.mark.ut
def test_encode_with_annotations(address_codec):
    serializer = TxrepSerializer(address_codec, annotate=True)
    tx = Transaction(
        source_account=PAYER,
        fee=100,
        seq_num=1,
        time_bounds=TimeBounds(min_time=1535756672, max_time=0),
        operations=[Payment(destination=DESTINATION, asset=USD, amount=Decimal("40.0004"))],
    )
    lines = _lines(serializer.encode(tx))

    assert "tx.timeBounds.minTime: 1535756672 (2018-08-31T23:04:32Z)" in lines
    assert "tx.timeBounds.maxTime: 0" in lines
    assert "tx.operations[0].body.paymentOp.amount: 400004000 (40.0004e7)" in lines


@pytest.mark.ut
def test_encode_rejects_fee_bump(serializer):
    envelope = FeeBumpTransaction(fee_source=PAYER, fee=400, inner_transaction=make_create_account_tx())
    with pytest.raises(UnsupportedTransactionKind):
        serializer.encode(envelope)


@pytest.mark.ut
def test_encode_rejects_unknown_operation(serializer):
    class Inflation(Operation):
        pass

    tx = Transaction(source_account=SOURCE, fee=100, seq_num=1, operations=[Inflation()])
    with pytest.raises(UnknownOperationKind):
        serializer.encode(tx)


@pytest.mark.ut
def test_encode_rejects_excess_precision(serializer):
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[CreateAccount(destination=DESTINATION, starting_balance=Decimal("1.00000001"))],
    )
    with pytest.raises(InvalidNumeric) as exc:
        serializer.encode(tx)
    assert exc.value.key == "tx.operations[0].body.createAccountOp.startingBalance"


@pytest.mark.ut
@pytest.mark.parametrize("fee", [-1, 1 << 32, True])
def test_encode_rejects_out_of_range_fee(serializer, fee):
    with pytest.raises(InvalidNumeric):
        serializer.encode(Transaction(source_account=SOURCE, fee=fee, seq_num=1))


@pytest.mark.ut
def test_encode_rejects_missing_required_value(serializer):
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[Payment(destination=DESTINATION, asset=None, amount=Decimal("1"))],
    )
    with pytest.raises(MissingField) as exc:
        serializer.encode(tx)
    assert exc.value.key == "tx.operations[0].body.paymentOp.asset"


@pytest.mark.ut
@pytest.mark.parametrize(
    "price, suffix",
    [
        (Price(n=1 << 40, d=1), "price.n"),
        (Price(n=-1, d=2), "price.n"),
        (Price(n=1, d=0), "price.d"),
        (Price(n=1, d=-2), "price.d"),
        (Price(n=1, d=1 << 31), "price.d"),
    ],
)
def test_encode_rejects_out_of_range_price(serializer, price, suffix):
    tx = Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1,
        operations=[ManageSellOffer(selling=XLM, buying=USD, amount=Decimal("1"), price=price)],
    )
    with pytest.raises(InvalidNumeric) as exc:
        serializer.encode(tx)
    assert exc.value.key == f"tx.operations[0].body.manageSellOfferOp.{suffix}"


@pytest.mark.ut
@pytest.mark.parametrize(
    "memo, key",
    [
        (Memo.from_hash(bytes(31)), "tx.memo.hash"),
        (Memo.from_hash(bytes(33)), "tx.memo.hash"),
        (Memo.from_return(bytes(33)), "tx.memo.retHash"),
        (Memo.from_return(b""), "tx.memo.retHash"),
    ],
)
def test_encode_rejects_wrong_size_memo_hash(serializer, memo, key):
    tx = make_create_account_tx()
    tx = Transaction(
        source_account=tx.source_account,
        fee=tx.fee,
        seq_num=tx.seq_num,
        memo=memo,
        operations=tx.operations,
    )
    with pytest.raises(InvalidEncoding) as exc:
        serializer.encode(tx)
    assert exc.value.key == key


@pytest.mark.ut
@pytest.mark.parametrize("hint", [bytes(3), bytes(5), b""])
def test_encode_rejects_wrong_size_signature_hint(serializer, hint):
    tx = make_signed_tx(operations=[])
    tx = Transaction(
        source_account=tx.source_account,
        fee=tx.fee,
        seq_num=tx.seq_num,
        signatures=[DecoratedSignature(hint=hint, signature=bytes(64))],
    )
    with pytest.raises(InvalidEncoding) as exc:
        serializer.encode(tx)
    assert exc.value.key == "signatures[0].hint"
