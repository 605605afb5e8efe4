"""Allow `python -m yeelightctl`."""

from yeelightctl.cli.main import cli

if __name__ == "__main__":
    cli()
