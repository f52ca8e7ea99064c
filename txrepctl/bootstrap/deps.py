import json
from functools import lru_cache

from pydantic import ValidationError

from txrep.core.facade import TxrepCodec
from txrep.infra.stellar_address import StellarAddressCodec
from txrepctl.bootstrap.config.loader import get_cli_args
from txrepctl.bootstrap.config.settings import TxrepConfig
from txrepctl.core.cmd import TxrepCtl
from txrepctl.core.dispatcher import CommandDispatcher
from txrepctl.core.ports.render import Renderer
from txrepctl.infra.format_renderer import renderer_for


@lru_cache
def get_dispatcher() -> CommandDispatcher:
    return CommandDispatcher()


@lru_cache
def get_config() -> TxrepConfig:
    try:
        return TxrepConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))


@lru_cache
def get_codec() -> TxrepCodec:
    args = get_cli_args()
    annotate = args.annotate if args.annotate is not None else get_config().encode.annotate
    return TxrepCodec.build(StellarAddressCodec(), annotate=annotate)


@lru_cache
def get_renderer() -> Renderer:
    args = get_cli_args()
    return renderer_for(args.format or get_config().render.format)


@lru_cache
def get_cli() -> TxrepCtl:
    return TxrepCtl(
        args=get_cli_args(),
        dispatcher=get_dispatcher(),
        codec=get_codec(),
        renderer=get_renderer(),
    )
