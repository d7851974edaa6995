import sys

from remotectl.bootstrap.deps import get_cli


def main():
    cli = get_cli()

    try:
        if cli.interactive:
            cli.cmdloop()
        else:
            cli.onecmd(cli.args.namespace)
    finally:
        cli.close()

    if cli.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
