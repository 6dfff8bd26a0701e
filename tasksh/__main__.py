"""
Main entry point for running tasksh as a module.

This allows the package to be executed directly with:
python -m tasksh
"""

from tasksh.main import app


def main() -> None:
    """Run the tasksh CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
