from remotecontrol.bootstrap.config.loader import get_cli_args
from remotecontrol.bootstrap.deps import get_config, get_cp, get_workbench
from remotecontrol.core.helpers.utils import setup_signal_handler, setup_logging, scan


@scan("remotecontrol.bootstrap.handlers")
def main():
    cli = get_cli_args()
    setup_logging(cli.log_level)

    config = get_config()
    controlplane = get_cp()
    loop = controlplane.loop

    port = None
    if config.workspace.autostart:
        port = cli.port if cli.port is not None else config.listener.port

    try:
        with setup_signal_handler(loop) as stop_event:
            loop.run_until_complete(controlplane.start(stop_event, port))
    except KeyboardInterrupt:
        pass
    finally:
        get_workbench().close()
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.run_until_complete(loop.shutdown_default_executor())
        finally:
            loop.close()


if __name__ == "__main__":
    main()
