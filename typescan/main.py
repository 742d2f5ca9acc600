# typescan/main.py

# The entry point only directs traffic; all commands live in the CLI module.
from typescan.cli.main import typescan


def main():
    """Runs the typescan command-line interface."""
    typescan()


if __name__ == '__main__':
    # Allows `python -m typescan.main scan ~/Downloads`.
    main()
