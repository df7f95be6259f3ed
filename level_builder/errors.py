"""Error kinds raised by the level core.

Every error derives from :class:`LevelError` so an editing session can catch
one type at its boundary. The concrete kinds also subclass the matching
builtin (``IndexError`` / ``ValueError``) so generic callers keep working.
"""


class LevelError(Exception):
    """Base class for recoverable level errors."""


class InvalidIndex(LevelError, IndexError):
    """Cell index outside ``[0, LEVEL_SIZE)``."""


class InvalidLevelData(LevelError, ValueError):
    """Import payload of the wrong length or structure."""


class DecodeError(InvalidLevelData):
    """Encoded level bytes/text could not be decoded."""


class EncodeError(LevelError, ValueError):
    """Grid holds a block with no representation in the target format."""
