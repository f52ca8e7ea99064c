import sys
from pathlib import Path
from typing import Any, TextIO

import yaml


class SourceLoader:
    """
    Reads command input: txrep text or a YAML/JSON transaction document,
    from a file path or from stdin when the path is '-'.
    """

    STDIN = "-"

    def __init__(self, stdin: TextIO | None = None) -> None:
        self._stdin = stdin

    def read_text(self, path: str) -> str:
        if path == self.STDIN:
            return (self._stdin or sys.stdin).read()

        file = Path(path).expanduser()
        if not file.is_file():
            raise FileNotFoundError(f"input not found: {file}")
        return file.read_text(encoding="utf-8")

    def load_document(self, path: str) -> dict[str, Any]:
        # JSON is a subset of YAML
        try:
            data = yaml.safe_load(self.read_text(path))
        except yaml.YAMLError as ex:
            raise ValueError(f"invalid document {path}: {ex}") from ex
        if not isinstance(data, dict):
            raise ValueError(f"expected a transaction mapping in {path}")
        return data
