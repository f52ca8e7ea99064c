from txrep.core.codec.parser import TxrepParser
from txrep.core.codec.serializer import TxrepSerializer
from txrep.core.models.transaction import FeeBumpTransaction, Transaction
from txrep.core.ports.address import AddressCodec


class TxrepCodec:
    """
    Both directions of the txrep codec built around one address codec.
    Stateless: a single instance can serve any number of calls.
    """

    def __init__(self, serializer: TxrepSerializer, parser: TxrepParser) -> None:
        self.serializer = serializer
        self.parser = parser

    @classmethod
    def build(cls, address_codec: AddressCodec, annotate: bool = False) -> "TxrepCodec":
        return cls(
            serializer=TxrepSerializer(address_codec, annotate=annotate),
            parser=TxrepParser(address_codec),
        )

    def encode(self, transaction: Transaction | FeeBumpTransaction) -> str:
        return self.serializer.encode(transaction)

    def decode(self, text: str) -> Transaction:
        return self.parser.decode(text)

    def normalize(self, text: str) -> str:
        """Canonical txrep for `text`: annotations dropped, fields in order."""
        return self.encode(self.decode(text))
