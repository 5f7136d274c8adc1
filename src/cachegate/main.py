"""Main entry point for the cachegate CLI.

Usage:
    python -m cachegate.main --help
    cachegate --help  # If installed via pip/uv
"""

from cachegate.cli import main

if __name__ == "__main__":
    main()
