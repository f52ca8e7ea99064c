from decimal import Decimal

from txrep.core.models.transaction import (
    AccountMerge,
    AllowTrust,
    Asset,
    BumpSequence,
    ChangeTrust,
    CreateAccount,
    CreatePassiveSellOffer,
    DecoratedSignature,
    ManageBuyOffer,
    ManageData,
    ManageSellOffer,
    Memo,
    PathPaymentStrictReceive,
    PathPaymentStrictSend,
    Payment,
    Price,
    SetOptions,
    Signer,
    SignerKeyType,
    TimeBounds,
    Transaction,
)


SOURCE = "GCUNWINQBGP6ZLAFNAU74OYZCMPBY4NQO6RCOBL2LEUKIWV3VQO7YOBF"
DESTINATION = "GBAF6NXN3DHSF357QBZLTBNWUTABKUODJXJYYE32ZDKA2QBM2H33IK6O"
ISSUER = "GAZFEVBSEGJJ63WPVVIWXLZLWN2JYZECECGT6GUNP4FJDVZVNXWQWMYI"
PAYER = "GAVRMS4QIOCC4QMOSKILOOOHCSO4FEKOXZPNLKFFN6W7SD2KUB7NBPLN"

USD = Asset(code="USD", issuer=ISSUER)
EUR = Asset(code="EUR", issuer=ISSUER)
XLM = Asset.native()

CREATE_ACCOUNT_TXREP = "\n".join([
    f"tx.sourceAccount: {SOURCE}",
    "tx.fee: 100",
    "tx.seqNum: 1375042369748993",
    "tx.timeBounds._present: true",
    "tx.timeBounds.minTime: 0",
    "tx.timeBounds.maxTime: 0",
    "tx.memo.type: MEMO_NONE",
    "tx.operations.len: 1",
    "tx.operations[0].sourceAccount._present: true",
    f"tx.operations[0].sourceAccount: {SOURCE}",
    "tx.operations[0].body.type: CREATE_ACCOUNT",
    f"tx.operations[0].body.createAccountOp.destination: {DESTINATION}",
    "tx.operations[0].body.createAccountOp.startingBalance: 123400000",
    "tx.ext.v: 0",
    "signatures.len: 0",
])

PAYMENT_TXREP = f"""
  tx.sourceAccount: {PAYER}
  tx.fee: 100
  tx.seqNum: 46489056724385793
  tx.timeBounds._present: true
  tx.timeBounds.minTime: 1535756672 (Fri Aug 31 16:04:32 PDT 2018)
  tx.timeBounds.maxTime: 1567292672 (Sat Aug 31 16:04:32 PDT 2019)
  tx.memo.type: MEMO_TEXT
  tx.memo.text: "Enjoy this transaction"
  tx.operations.len: 1
  tx.operations[0].sourceAccount._present: false
  tx.operations[0].body.type: PAYMENT
  tx.operations[0].body.paymentOp.destination: {DESTINATION}
  tx.operations[0].body.paymentOp.asset: USD:{ISSUER}
  tx.operations[0].body.paymentOp.amount: 400004000 (40.0004e7)
  tx.ext.v: 0
  signatures.len: 1
  signatures[0].hint: 4aa07ed0 ({PAYER} signer for account {PAYER})
  signatures[0].signature: defb4f1fad1c279327b55af184fdcddf73f4f7a8cb40e7e534a71d73a05124ba369db7a6d31b47cafd118592246a8575e6c249ab94ec3768dedb6292221ce50c
  """


def make_create_account_tx() -> Transaction:
    return Transaction(
        source_account=SOURCE,
        fee=100,
        seq_num=1375042369748993,
        time_bounds=TimeBounds(min_time=0, max_time=0),
        memo=Memo.none(),
        operations=[
            CreateAccount(
                source_account=SOURCE,
                destination=DESTINATION,
                starting_balance=Decimal("12.34"),
            )
        ],
    )


def make_every_operation() -> list:
    return [
        CreateAccount(destination=DESTINATION, starting_balance=Decimal("12.34")),
        Payment(source_account=PAYER, destination=DESTINATION, asset=USD, amount=Decimal("0.0000001")),
        PathPaymentStrictReceive(
            send_asset=XLM,
            send_max=Decimal("100"),
            destination=DESTINATION,
            dest_asset=USD,
            dest_amount=Decimal("42.5"),
            path=[EUR, XLM],
        ),
        PathPaymentStrictSend(
            send_asset=USD,
            send_amount=Decimal("10"),
            destination=DESTINATION,
            dest_asset=EUR,
            dest_min=Decimal("9.9999999"),
        ),
        ManageSellOffer(selling=XLM, buying=USD, amount=Decimal("5"), price=Price(n=3, d=2), offer_id=7),
        CreatePassiveSellOffer(selling=USD, buying=EUR, amount=Decimal("1.5"), price=Price(n=1, d=3)),
        SetOptions(
            inflation_dest=DESTINATION,
            set_flags=3,
            master_weight=255,
            home_domain="example.com",
            signer=Signer(type=SignerKeyType.pre_auth_tx, key=bytes(range(32)), weight=1),
        ),
        SetOptions(),
        ChangeTrust(line=USD, limit=Decimal("922337203685.4775807")),
        ChangeTrust(line=EUR),
        AllowTrust(trustor=PAYER, asset_code="USD", authorize=1),
        AccountMerge(destination=DESTINATION),
        ManageData(data_name="config", data_value=b"\x00\x01\xfe"),
        ManageData(data_name="deleted"),
        BumpSequence(bump_to=1375042369749000),
        ManageBuyOffer(selling=EUR, buying=XLM, buy_amount=Decimal("12"), price=Price(n=2147483647, d=1)),
    ]


def make_signed_tx(operations=None, memo=None, time_bounds=None) -> Transaction:
    return Transaction(
        source_account=PAYER,
        fee=1600,
        seq_num=46489056724385793,
        time_bounds=time_bounds,
        memo=memo or Memo.none(),
        operations=operations if operations is not None else make_every_operation(),
        signatures=[
            DecoratedSignature(hint=bytes.fromhex("4aa07ed0"), signature=bytes(range(64))),
        ],
    )
