import re

from txrep.core.helpers.numeric import UINT32, parse_integer
from txrep.core.models.errors import (
    InvalidEncoding,
    LengthMismatch,
    MalformedLine,
    MissingField,
)


PRESENT = "_present"
LENGTH = "len"

_INDEX = re.compile(r"(\d{1,20})\]")


def present_key(key: str) -> str:
    return f"{key}.{PRESENT}"


def length_key(key: str) -> str:
    return f"{key}.{LENGTH}"


def item_key(key: str, index: int) -> str:
    return f"{key}[{index}]"


def token(raw: str) -> str:
    """
    Semantic part of a raw value: everything up to the first whitespace.
    What follows is a human annotation, e.g. ``1535756672 (Fri Aug 31 ...)``.
    """
    parts = raw.split(maxsplit=1)
    return parts[0] if parts else ""


class LineWriter:
    """
    Accumulates txrep lines in emission order and applies the two framing
    directives: presence (``<key>._present``) ahead of optional values and
    length (``<key>.len``) ahead of indexed sequences.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def line(self, key: str, value: object) -> None:
        self._lines.append(f"{key}: {value}")

    def present(self, key: str, flag: bool) -> bool:
        self.line(present_key(key), "true" if flag else "false")
        return flag

    def length(self, key: str, count: int) -> None:
        self.line(length_key(key), count)

    def render(self) -> str:
        return "\n".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


class LineReader:
    """
    Ordered ``key -> raw value`` view over txrep text.

    Every lookup marks its key as consumed; `finish` rejects whatever the
    schema walk never asked for, so stray or misspelled keys are reported
    instead of silently dropped.
    """

    def __init__(self, values: dict[str, str]) -> None:
        self._values = values
        self._consumed: set[str] = set()

    @classmethod
    def from_text(cls, text: str) -> "LineReader":
        values: dict[str, str] = {}

        for number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            key, sep, value = line.partition(":")
            key = key.strip()
            if not sep or not key or len(key.split()) != 1:
                raise MalformedLine("expected 'key: value'", key or None, number)

            if key in values:
                raise MalformedLine("duplicate key", key, number)

            values[key] = value.strip()

        return cls(values)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def raw(self, key: str) -> str:
        try:
            value = self._values[key]
        except KeyError:
            raise MissingField("required key is missing", key) from None
        self._consumed.add(key)
        return value

    def present(self, key: str) -> bool:
        flag_key = present_key(key)
        flag = token(self.raw(flag_key))
        if flag == "true":
            return True
        if flag == "false":
            return False
        raise InvalidEncoding(f"expected 'true' or 'false', got {flag!r}", flag_key)

    def length(self, key: str) -> int:
        """
        Read ``<key>.len`` and check it against the indices actually present
        under ``<key>[i]``.
        """
        count_key = length_key(key)
        count = parse_integer(token(self.raw(count_key)), UINT32, count_key)

        # distinct non-negative indices whose max is count-1 are exactly 0..count-1
        found = self._indices(key)
        if len(found) != count or max(found, default=-1) != count - 1:
            raise LengthMismatch(
                f"declared {count} elements, found indices {sorted(found)}", count_key
            )

        return count

    def finish(self) -> None:
        for key in self._values:
            if key not in self._consumed:
                raise MalformedLine("unrecognized key", key)

    def _indices(self, key: str) -> set[int]:
        prefix = f"{key}["
        found = set()
        for candidate in self._values:
            if candidate.startswith(prefix):
                match = _INDEX.match(candidate, len(prefix))
                if match is not None:
                    found.add(int(match.group(1)))
        return found
