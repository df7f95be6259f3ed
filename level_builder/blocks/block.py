"""Block catalog.

A level cell holds one :class:`Block`. Blocks come from a closed catalog
(:class:`BlockKind`); each kind has two spellings:

* the *builder id* used by the editor and the 1D patch (``"b0"``, ``"a1"``,
  ``"null"`` for an empty cell), and
* the *LBL code* used by the compact level file (``"B0"``, ``"A1"``, ``"00"``).

Two kinds carry a free-form payload in ``Block.text``:

* ``NOTE`` is the parametric block. Its builder id is ``"Note:<text>"`` and its
  LBL code is ``"N0:<escaped text>"``.
* ``UNKNOWN`` keeps an unrecognized builder id verbatim. The grid accepts it so
  editing never fails on a missing asset, but it has no LBL code.
"""

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Dict, Optional, Tuple

from level_builder.types import EMPTY_ID


NOTE_BUILDER_PREFIX = "Note:"
NOTE_LBL_PREFIX = "N0:"
NOTE_ASSET = "note"


class Direction(StrEnum):
    """Facing of directional blocks, in builder id order."""

    UP = auto()
    RIGHT = auto()
    DOWN = auto()
    LEFT = auto()


class BlockKind(StrEnum):
    """Enumeration of catalog block kinds."""

    EMPTY = auto()
    BLOCK = auto()
    ARROW_UP = auto()
    ARROW_RIGHT = auto()
    ARROW_DOWN = auto()
    ARROW_LEFT = auto()
    SPIKES_UP = auto()
    SPIKES_RIGHT = auto()
    SPIKES_DOWN = auto()
    SPIKES_LEFT = auto()
    KEY = auto()
    LOCK = auto()
    EXIT = auto()
    PLAYER = auto()
    TOGGLE_ON = auto()
    TOGGLE_OFF = auto()
    SWITCH = auto()
    FRAGILE = auto()
    NOTE = auto()
    UNKNOWN = auto()


# kind -> (builder id, LBL code) for every payload-free kind
CATALOG: Dict[BlockKind, Tuple[str, str]] = {
    BlockKind.EMPTY: (EMPTY_ID, "00"),
    BlockKind.BLOCK: ("b0", "B0"),
    BlockKind.ARROW_UP: ("a0", "A0"),
    BlockKind.ARROW_RIGHT: ("a1", "A1"),
    BlockKind.ARROW_DOWN: ("a2", "A2"),
    BlockKind.ARROW_LEFT: ("a3", "A3"),
    BlockKind.SPIKES_UP: ("s0", "S0"),
    BlockKind.SPIKES_RIGHT: ("s1", "S1"),
    BlockKind.SPIKES_DOWN: ("s2", "S2"),
    BlockKind.SPIKES_LEFT: ("s3", "S3"),
    BlockKind.KEY: ("k0", "K0"),
    BlockKind.LOCK: ("l0", "L0"),
    BlockKind.EXIT: ("x0", "X0"),
    BlockKind.PLAYER: ("p0", "P0"),
    BlockKind.TOGGLE_ON: ("t0", "T0"),
    BlockKind.TOGGLE_OFF: ("t1", "T1"),
    BlockKind.SWITCH: ("w0", "W0"),
    BlockKind.FRAGILE: ("f0", "F0"),
}

_BY_BUILDER_ID: Dict[str, BlockKind] = {ids[0]: kind for kind, ids in CATALOG.items()}
_BY_LBL_CODE: Dict[str, BlockKind] = {ids[1]: kind for kind, ids in CATALOG.items()}

DIRECTIONAL: Dict[BlockKind, Direction] = {
    BlockKind.ARROW_UP: Direction.UP,
    BlockKind.ARROW_RIGHT: Direction.RIGHT,
    BlockKind.ARROW_DOWN: Direction.DOWN,
    BlockKind.ARROW_LEFT: Direction.LEFT,
    BlockKind.SPIKES_UP: Direction.UP,
    BlockKind.SPIKES_RIGHT: Direction.RIGHT,
    BlockKind.SPIKES_DOWN: Direction.DOWN,
    BlockKind.SPIKES_LEFT: Direction.LEFT,
}


PAYLOAD_KINDS = frozenset({BlockKind.NOTE, BlockKind.UNKNOWN})


def escape_note(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def unescape_note(text: str) -> Optional[str]:
    """Inverse of :func:`escape_note`; ``None`` on a dangling or unknown escape."""
    out = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt == "\\":
            out.append("\\")
        elif nxt == "n":
            out.append("\n")
        elif nxt == "r":
            out.append("\r")
        else:
            return None
    return "".join(out)


@dataclass(frozen=True)
class Block:
    """One cell value.

    Attributes:
        kind: Catalog kind.
        text: Note payload for ``NOTE``, raw builder id for ``UNKNOWN``,
            ``None`` otherwise.
    """

    kind: BlockKind
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind in PAYLOAD_KINDS:
            if not isinstance(self.text, str):
                raise ValueError(f"{self.kind} block requires a text payload")
        elif self.text is not None:
            raise ValueError(
                f"{self.kind} block takes no text payload, got {self.text!r}"
            )

    @classmethod
    def note(cls, text: str) -> "Block":
        return cls(BlockKind.NOTE, text)

    @classmethod
    def parse(cls, builder_id: str) -> "Block":
        """Parse a builder id. Total: unrecognized ids become ``UNKNOWN``."""
        kind = _BY_BUILDER_ID.get(builder_id)
        if kind is not None:
            return cls(kind)
        if builder_id.startswith(NOTE_BUILDER_PREFIX):
            return cls.note(builder_id[len(NOTE_BUILDER_PREFIX) :])
        return cls(BlockKind.UNKNOWN, builder_id)

    @classmethod
    def from_lbl(cls, code: str) -> Optional["Block"]:
        """Parse an LBL code, ``None`` if it is not in the catalog."""
        kind = _BY_LBL_CODE.get(code)
        if kind is not None:
            return cls(kind)
        if code.startswith(NOTE_LBL_PREFIX):
            text = unescape_note(code[len(NOTE_LBL_PREFIX) :])
            if text is None:
                return None
            return cls.note(text)
        return None

    @property
    def builder_id(self) -> str:
        if self.kind is BlockKind.NOTE:
            return f"{NOTE_BUILDER_PREFIX}{self.text or ''}"
        if self.kind is BlockKind.UNKNOWN:
            return self.text or ""
        return CATALOG[self.kind][0]

    @property
    def lbl(self) -> Optional[str]:
        """LBL code, or ``None`` for ``UNKNOWN`` blocks."""
        if self.kind is BlockKind.NOTE:
            return f"{NOTE_LBL_PREFIX}{escape_note(self.text or '')}"
        if self.kind is BlockKind.UNKNOWN:
            return None
        return CATALOG[self.kind][1]

    @property
    def asset_name(self) -> str:
        """Texture name used by rasterizers; every note shares one asset."""
        if self.kind is BlockKind.NOTE:
            return NOTE_ASSET
        return self.builder_id

    @property
    def direction(self) -> Optional[Direction]:
        return DIRECTIONAL.get(self.kind)

    @property
    def is_empty(self) -> bool:
        return self.kind is BlockKind.EMPTY

    @property
    def is_known(self) -> bool:
        return self.kind is not BlockKind.UNKNOWN

    def __str__(self) -> str:
        return self.builder_id


EMPTY = Block(BlockKind.EMPTY)
