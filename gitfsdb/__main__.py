"""Module entrypoint for ``python -m gitfsdb``.

All argument parsing happens in ``gitfsdb.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
