"""Period-delimited text chunking for embedding."""

_DELIMITER = "."


def generate_chunks(text: str) -> list[str]:
    """Split text into chunks on every period.

    The input is trimmed first and empty segments are dropped. Segments are
    otherwise kept verbatim, including leading spaces and whitespace-only
    pieces, so chunk *i* always lines up with embedding *i*.
    """
    return [part for part in text.strip().split(_DELIMITER) if part != ""]
