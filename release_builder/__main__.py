"""Allow running the release builder with ``python -m release_builder``."""

from .cli import main

if __name__ == "__main__":
    main()
