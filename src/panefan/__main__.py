"""Module entrypoint for `python -m panefan`."""

try:
    from .cli import run
except ImportError:
    # Executed as a plain script outside package context.
    from panefan.cli import run


if __name__ == "__main__":
    raise SystemExit(run())
