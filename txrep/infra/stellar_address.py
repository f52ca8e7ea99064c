from stellar_sdk import StrKey

from txrep.core.ports.address import AddressCodec


class StellarAddressCodec(AddressCodec):
    """
    AddressCodec backed by stellar_sdk's StrKey (base32 with version byte
    and CRC16 checksum). StrKey decoders raise ValueError subclasses on
    malformed input, which is what the parser expects.
    """

    def is_valid_account(self, address: str) -> bool:
        return StrKey.is_valid_ed25519_public_key(address)

    def encode_pre_auth_tx(self, raw: bytes) -> str:
        return StrKey.encode_pre_auth_tx(raw)

    def decode_pre_auth_tx(self, text: str) -> bytes:
        return StrKey.decode_pre_auth_tx(text)

    def encode_sha256_hash(self, raw: bytes) -> str:
        return StrKey.encode_sha256_hash(raw)

    def decode_sha256_hash(self, text: str) -> bytes:
        return StrKey.decode_sha256_hash(text)
