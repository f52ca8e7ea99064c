import argparse
from typing import Any

from txrep.core.codec.document import from_document, to_document
from txrep.core.facade import TxrepCodec
from txrepctl.bootstrap.deps import get_dispatcher
from txrepctl.core.loader import SourceLoader

dispatcher = get_dispatcher()


@dispatcher.command("decode")
def cmd_decode(
    codec: TxrepCodec,
    loader: SourceLoader,
    namespace: argparse.Namespace
) -> dict[str, Any]:
    text = loader.read_text(namespace.file)
    return to_document(codec.decode(text))


@dispatcher.command("encode")
def cmd_encode(
    codec: TxrepCodec,
    loader: SourceLoader,
    namespace: argparse.Namespace
) -> str:
    document = loader.load_document(namespace.file)
    return codec.encode(from_document(document))


@dispatcher.command("normalize")
def cmd_normalize(
    codec: TxrepCodec,
    loader: SourceLoader,
    namespace: argparse.Namespace
) -> str:
    return codec.normalize(loader.read_text(namespace.file))
