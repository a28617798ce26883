"""catlr — directory audit: filtered tree listing plus file contents."""

__version__ = "0.1.0"


class CatlrError(Exception):
    """User-facing error.

    The message is printed to stderr prefixed with ``catlr:``.
    """
