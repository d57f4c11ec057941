"""sublaunch - start debuggee programs as subprocesses and route their output."""

__all__ = ["__version__", "main"]
__version__ = "0.1.0"


def main() -> None:
	"""Entry point that mirrors :func:`sublaunch.cli.main`."""
	from sublaunch.cli import main as _cli_main

	_cli_main()
