import argparse
import os
from functools import lru_cache
from pathlib import Path

from txrep.core.helpers.utils import LOG_LEVELS


DEFAULT_CONFIG_NAME = "txrep.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="txrepctl",
        description=(
            "Convert ledger transactions between txrep, the line-oriented\n"
            "human readable form, and YAML/JSON transaction documents."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a txrep configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help=(
            "Logging verbosity. Defaults to the configured log_level.\n"
            "DEBUG    → per-call encode/decode traces.\n"
            "WARNING  → only warnings and errors (default).\n"
        ),
    )

    parser.add_argument(
        "-f", "--format",
        type=str,
        default=None,
        choices=["yaml", "json"],
        help="Output format of decoded transaction documents."
    )

    parser.add_argument(
        "--annotate",
        action="store_true",
        default=None,
        help="Append human readable annotations to amounts and timestamps."
    )

    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser("decode", help="txrep → transaction document")
    decode.add_argument("file", nargs="?", default="-")

    encode = sub.add_parser("encode", help="transaction document → txrep")
    encode.add_argument("file", nargs="?", default="-")

    normalize = sub.add_parser("normalize", help="txrep → canonical txrep")
    normalize.add_argument("file", nargs="?", default="-")

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def resolve_configfile(cli_path: str | None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv("TXREPCONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIG_NAME
        return file if file.is_file() else None

    file = Path(raw).expanduser()
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the TXREPCONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIG_NAME}' file in the current working directory."
        )

    return file


@lru_cache
def get_configfile() -> Path | None:
    return resolve_configfile(get_cli_args().config)
