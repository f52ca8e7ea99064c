class TxrepError(ValueError):
    """
    Base class of every error raised by the txrep codec.

    Carries the offending txrep key (e.g. ``tx.operations[0].body.type``)
    when the failure can be attributed to one, so callers can point an
    operator at the exact line to fix.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.key}: {self.message}"


class UnsupportedTransactionKind(TxrepError):
    """Encode was given a transaction variant with no body mapping (fee bump)."""


class UnknownOperationKind(TxrepError):
    """An operation variant or type tag outside the supported set."""


class MalformedLine(TxrepError):
    """A line that cannot be split into ``path: value``, or an unexpected key."""

    def __init__(self, message: str, key: str | None = None, line: int | None = None) -> None:
        super().__init__(message, key)
        self.line = line

    def __str__(self) -> str:
        text = super().__str__()
        if self.line is None:
            return text
        return f"line {self.line}: {text}"


class MissingField(TxrepError):
    pass


class LengthMismatch(TxrepError):
    pass


class InvalidNumeric(TxrepError):
    pass


class InvalidEncoding(TxrepError):
    pass
