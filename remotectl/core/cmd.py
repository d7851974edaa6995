import argparse
import cmd
import os

from remotectl.core.client import RemoteControlClient


DEFAULT_SERVER = "localhost:12345"


class RemoteCmd(cmd.Cmd):
    intro = (
        "Entering remotectl interactive mode. Every line is sent as a command.\n"
        "Type 'exit' or 'quit' to leave."
    )
    prompt = "remotectl> "

    def __init__(self, argv: list[str] | None = None) -> None:
        super().__init__()

        self._argparser = self._argparse()
        self._args = self._argparser.parse_args(argv)
        self._client = self._get_client()
        self.failed = False

    @property
    def args(self) -> argparse.Namespace:
        return self._args

    @property
    def interactive(self) -> bool:
        return self._args.namespace is None

    @property
    def client(self) -> RemoteControlClient:
        return self._client

    def close(self):
        self._client.close()

    def handle(self, line: str) -> None:
        try:
            self._client.send_line(line)
        except (OSError, ValueError) as ex:
            self.failed = True
            print(str(ex))

    def do_send(self, line):
        if self.interactive:
            if not line.strip():
                print("Usage: send <command> [argument]")
                return
            self.handle(line.strip())
            return

        argument = " ".join(self.args.argument)
        line = f"{self.args.token} {argument}" if argument else self.args.token
        self.handle(line)

    def default(self, line):
        self.handle(line)

    def emptyline(self):
        # cmd.Cmd repeats the last command on an empty line by default.
        return False

    def do_exit(self, arg):
        return True

    def do_quit(self, arg):
        return True

    def do_EOF(self, arg):
        print()
        return True

    def _get_client(self) -> RemoteControlClient:
        host, port_str = self._args.server.rsplit(":", 1)
        port = int(port_str)

        client = RemoteControlClient(host, port, encoding=self._args.encoding)
        self.prompt = f"remotectl({host}:{port})> "
        return client

    @staticmethod
    def _argparse() -> argparse.ArgumentParser:
        global_opts = argparse.ArgumentParser(prog="remotectl")
        global_opts.add_argument(
            "--server",
            default=os.environ.get("REMOTECTL_SERVER", DEFAULT_SERVER),
            help=f"Listener address as host:port (default: {DEFAULT_SERVER})",
        )
        global_opts.add_argument("--encoding", default="utf-8")

        sub = global_opts.add_subparsers(dest="namespace")

        send = sub.add_parser("send", help="Send a single command and exit")
        send.add_argument("token")
        send.add_argument("argument", nargs=argparse.REMAINDER)

        return global_opts
