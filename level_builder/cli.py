"""Command-line tools for level files.

    python -m level_builder info level.txt
    python -m level_builder convert level.txt level.as --to as3 --level 4
    python -m level_builder render level.txt level.png --dark --grid
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import List, Optional

from level_builder.builder import LevelBuilder
from level_builder.codec import FileFormat, guess_format
from level_builder.config import DEFAULT_ASSET_ROOT, BuilderConfig, RenderConfig
from level_builder.errors import LevelError
from level_builder.types import LevelNumber
from level_builder.utils.logging import setup_default_logging

logger = logging.getLogger(__name__)


def parse_level_number(value: str) -> LevelNumber:
    return int(value) if value.isdigit() else value


def load_builder(path: Path, config: Optional[BuilderConfig] = None) -> LevelBuilder:
    builder = LevelBuilder(config=config)
    builder.import_level(path.read_bytes())
    return builder


def cmd_info(args: argparse.Namespace) -> int:
    data = args.input.read_bytes()
    fmt = guess_format(data.decode("utf-8", errors="replace"))
    builder = load_builder(args.input)
    counts = Counter(block.kind for block in builder.grid.blocks())
    print(f"format: {fmt}")
    print(f"level: {builder.get_level()}")
    for kind, count in sorted(counts.items()):
        print(f"{kind}: {count}")
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    builder = load_builder(args.input)
    if args.level is not None:
        builder.set_level(args.level)
    args.output.write_text(builder.export(args.to), encoding="utf-8")
    logger.info("Wrote %s (%s)", args.output, args.to)
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    config = BuilderConfig(grid=args.grid, render=RenderConfig(asset_root=args.assets))
    builder = load_builder(args.input, config)
    builder.set_dark(args.dark)
    builder.get_frame().save(args.output)
    logger.info("Wrote %s", args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="level_builder", description=__doc__.split("\n")[0])
    parser.add_argument("--log-level", default="WARNING", help="Logging level name")
    sub = parser.add_subparsers(dest="command", required=True)

    p_info = sub.add_parser("info", help="Summarize a level file")
    p_info.add_argument("input", type=Path)
    p_info.set_defaults(func=cmd_info)

    p_convert = sub.add_parser("convert", help="Convert between LBL and AS3")
    p_convert.add_argument("input", type=Path)
    p_convert.add_argument("output", type=Path)
    p_convert.add_argument(
        "--to", choices=[f.value for f in FileFormat], default=FileFormat.LBL.value
    )
    p_convert.add_argument("--level", type=parse_level_number, default=None)
    p_convert.set_defaults(func=cmd_convert)

    p_render = sub.add_parser("render", help="Render a level file to PNG")
    p_render.add_argument("input", type=Path)
    p_render.add_argument("output", type=Path)
    p_render.add_argument("--assets", default=DEFAULT_ASSET_ROOT)
    p_render.add_argument("--dark", action="store_true")
    p_render.add_argument("--grid", action="store_true")
    p_render.set_defaults(func=cmd_render)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_default_logging(args.log_level)
    try:
        return args.func(args)
    except (LevelError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
