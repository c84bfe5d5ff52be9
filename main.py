# main.py
import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog
import yaml

from pathmap.config import DEFAULT_CONFIG_FILE, load_map_config
from pathmap.render import BoardRecorder
from pathmap.utils.logging_utils import setup_logging
from pathmap.world.generator import GenerationError, PathMap, generate_path_map

log = structlog.get_logger() # module-level logger

CELL_WIDTH = 4
EMPTY_CELL_CHAR = "."


# --- Map Printing ---
def _node_char(kind: str) -> str:
    return kind[:1].upper() if kind else "?"


def format_path_map(path_map: PathMap) -> str:
    """Draws the board as text, floor 0 at the top.

    Straight paths are ``|``; ``\\`` and ``/`` lead one column right or left;
    two diagonals crossing between the same pair of columns show as ``X``.
    """
    width = path_map.max_width * CELL_WIDTH
    lines: List[str] = []
    for floor in range(path_map.map_length):
        row = [" "] * width
        for column in range(path_map.max_width):
            node = path_map.node_at(floor, column)
            row[column * CELL_WIDTH + 1] = _node_char(node.kind) if node else EMPTY_CELL_CHAR
        lines.append(f"{floor:<3}|" + "".join(row).rstrip())

        if floor == path_map.map_length - 1:
            break
        links = [" "] * width
        for source, destination in path_map.iter_edges():
            if source.floor != floor:
                continue
            step = destination.column - source.column
            pos = source.column * CELL_WIDTH + 1 + step * (CELL_WIDTH // 2)
            char = {0: "|", 1: "\\", -1: "/"}[step]
            if links[pos] not in (" ", char):
                char = "X"
            links[pos] = char
        lines.append("   |" + "".join(links).rstrip())
    return "\n".join(lines)


# --- CLI ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a branching path map of points of interest."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help=f"YAML map configuration (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the attempt seed stream (default: config value, else random)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Give up after this many rejected boards (0 = never).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        config = load_map_config(args.config)
        recorder = BoardRecorder()
        result = generate_path_map(
            config, seed=args.seed, renderer=recorder, max_attempts=args.max_attempts
        )
    except FileNotFoundError as e:
        log.critical("Required file not found", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except yaml.YAMLError as e:
        log.critical("Config file is not valid YAML", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        log.critical("Configuration failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GenerationError as e:
        log.critical("Generation failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    path_map = result.path_map
    log.info(
        "Path map ready",
        seed=result.seed,
        attempts=result.attempts,
        points=len(recorder.nodes),
        connections=path_map.edge_count,
        segments=len(recorder.segments),
    )
    print(format_path_map(path_map))
    return 0


if __name__ == "__main__":
    sys.exit(main())
