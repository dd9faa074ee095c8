"""Module entrypoint for ``python -m lazygallery``.

All argument parsing and runtime setup happen in ``lazygallery.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
