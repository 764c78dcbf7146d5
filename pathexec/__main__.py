"""Allow pathexec to be executable through `python -m pathexec`."""
from pathexec.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="pathexec")
