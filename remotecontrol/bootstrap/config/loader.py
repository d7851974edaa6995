import argparse
import os
from functools import lru_cache
from pathlib import Path


CONFIG_ENV = "REMOTECONTROLCONFIG"
DEFAULT_CONFIG_FILE = "remotecontrol.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remotecontrol",
        description=(
            "Start the remote command listener.\n\n"
            "The listener accepts newline-terminated text commands over TCP\n"
            "and runs each one against the editor workbench."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a remotecontrol configuration file"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        help="TCP port to listen on, overrides the configured port"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity for the listener.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → every received command and dispatch decision.\n"
            "INFO     → connections, lifecycle and commands (default).\n"
            "WARNING  → unknown commands and protocol problems.\n"
            "ERROR    → failed commands, socket and bind errors.\n"
            "CRITICAL → only critical failures.\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def resolve_configfile(cli_path: str | None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv(CONFIG_ENV)

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIG_FILE
        return file if file.is_file() else None

    file = Path(raw).expanduser()
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            f"  - Or set the {CONFIG_ENV} environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIG_FILE}' file in the current working directory."
        )

    return file


@lru_cache
def get_configfile() -> Path | None:
    return resolve_configfile(get_cli_args().config)
