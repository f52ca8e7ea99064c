import argparse
import logging
import sys
from typing import TextIO

from txrep.core.facade import TxrepCodec
from txrepctl.core.dispatcher import CommandDispatcher
from txrepctl.core.loader import SourceLoader
from txrepctl.core.ports.render import Renderer


class TxrepCtl:
    """
    Runs one txrepctl command: dispatches it, renders document results
    and reports failures on stderr with a non-zero exit code.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        dispatcher: CommandDispatcher,
        codec: TxrepCodec,
        renderer: Renderer,
        loader: SourceLoader | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._args = args
        self._dispatcher = dispatcher
        self._codec = codec
        self._renderer = renderer
        self._loader = loader or SourceLoader()
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self._logger = logging.getLogger("txrepctl.cmd")

    @property
    def args(self) -> argparse.Namespace:
        return self._args

    def run(self) -> int:
        command = self._args.command
        try:
            result = self._dispatcher.dispatch(
                command,
                codec=self._codec,
                loader=self._loader,
                namespace=self._args
            )
        except (ValueError, OSError) as ex:
            self._logger.debug(f"Command '{command}' failed", exc_info=ex)
            print(f"error: {ex}", file=self._err)
            return 1

        if isinstance(result, dict):
            result = self._renderer.render(result)
        print(result, file=self._out)
        return 0
