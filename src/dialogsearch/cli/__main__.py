"""Main entry point for dialogsearch CLI when run as a module."""

from dialogsearch.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
