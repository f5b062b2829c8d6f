"""Allow running assetsync as ``python -m assetsync``."""

from assetsync.cli import cli_main

if __name__ == "__main__":
    cli_main()
