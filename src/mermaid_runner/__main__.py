"""Module entry point for: python -m mermaid_runner"""

from mermaid_runner.cli.app import app


def main():
    app()


if __name__ == "__main__":
    main()
