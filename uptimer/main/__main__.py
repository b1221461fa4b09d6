"""
Main module entry point.

This allows running the command line interface as: python -m uptimer.main
"""

from uptimer.presentation.cli import app


def main() -> None:
    app(prog_name="uptimer")


if __name__ == "__main__":
    main()
