import argparse
import functools
from typing import Any, Protocol

from txrep.core.facade import TxrepCodec
from txrepctl.core.loader import SourceLoader


class CommandHandler(Protocol):
    def __call__(
        self,
        codec: TxrepCodec,
        loader: SourceLoader,
        namespace: argparse.Namespace,
    ) -> str | dict[str, Any]:
        ...


class CommandDispatcher:
    """
    Maps command names to handlers registered with `command`.
    A handler returns either ready-to-print text or a document that the
    caller renders.
    """

    def __init__(self) -> None:
        self._commands: dict[tuple[str, ...], CommandHandler] = {}

    def dispatch(
        self,
        *arguments: str,
        codec: TxrepCodec,
        loader: SourceLoader,
        namespace: argparse.Namespace
    ) -> str | dict[str, Any]:
        command = self._commands.get(arguments)
        if command is None:
            raise RuntimeError(f"Unknown '{' '.join(arguments)}' command")
        return command(codec, loader, namespace)

    def command(self, *arguments: str):
        def decorator(func: CommandHandler):
            if arguments in self._commands:
                raise RuntimeError(f"Handler already registered for '{' '.join(arguments)}'")

            @functools.wraps(func)
            def wrapper(
                codec: TxrepCodec,
                loader: SourceLoader,
                namespace: argparse.Namespace,
            ) -> str | dict[str, Any]:
                return func(codec, loader, namespace)

            self._commands[arguments] = wrapper

            return wrapper

        return decorator

    def commands(self) -> list[tuple[str, ...]]:
        return list(self._commands)
