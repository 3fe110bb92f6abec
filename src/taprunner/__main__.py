"""Allow ``python -m taprunner``."""

from taprunner.cli.main import cli

if __name__ == "__main__":
    cli()
