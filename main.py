"""Thin shim for IDEs and direct execution."""

from liveuamap_news.cli import main

if __name__ == "__main__":
    import sys

    # Direct runs default to debug output unless a level was given.
    if not any(arg.startswith("--log-level") for arg in sys.argv):
        sys.argv.extend(["--log-level", "DEBUG"])

    sys.exit(main())
