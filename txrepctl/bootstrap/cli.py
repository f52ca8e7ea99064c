from txrep.core.helpers.utils import scan, setup_logging
from txrepctl.bootstrap.deps import get_cli, get_config


@scan("txrepctl.bootstrap.commands")
def main():
    cli = get_cli()
    setup_logging(cli.args.log_level or get_config().log_level)
    raise SystemExit(cli.run())


if __name__ == "__main__":
    main()
