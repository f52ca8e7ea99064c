from typing import Protocol


class AddressCodec(Protocol):
    """
    Checksum encoding of raw key material to and from account-style
    address strings (G..., T..., X...).

    The codec only calls it at two boundaries: rendering/reading signer
    keys, and validating source accounts on decode. Decoders must raise
    ValueError on malformed input.
    """

    def is_valid_account(self, address: str) -> bool:
        """Return True if `address` is a well-formed ed25519 account id."""

    def encode_pre_auth_tx(self, raw: bytes) -> str:
        """Encode a 32-byte pre-authorized transaction hash (T...)."""

    def decode_pre_auth_tx(self, text: str) -> bytes:
        """Decode a T... address into its 32 raw bytes."""

    def encode_sha256_hash(self, raw: bytes) -> str:
        """Encode a 32-byte sha256 hash signer key (X...)."""

    def decode_sha256_hash(self, text: str) -> bytes:
        """Decode an X... address into its 32 raw bytes."""
