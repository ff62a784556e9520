# qalam/__main__.py
"""
Entry point for Qalam CLI.
"""
from qalam.cli import app


def main():
    app(prog_name="qalam")


if __name__ == "__main__":
    main()
