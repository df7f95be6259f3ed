"""Level serialization.

* :mod:`.patch` - flat builder-id lists (the "1D patch").
* :mod:`.lbl` - the compact line-per-cell level file.
* :mod:`.as3` - ``lvlArray`` source snippets with a level slot.
* :mod:`.format` - format guessing and dispatch used by imports.
"""

from .as3 import decode_as3, encode_as3
from .format import FileFormat, decode, encode, guess_format, parse_format
from .lbl import decode_lbl, encode_lbl
from .patch import export_1d_patch, from_patch, to_patch

__all__ = [
    "FileFormat",
    "decode",
    "decode_as3",
    "decode_lbl",
    "encode",
    "encode_as3",
    "encode_lbl",
    "export_1d_patch",
    "from_patch",
    "guess_format",
    "parse_format",
    "to_patch",
]
