"""
Path mini-language

A restricted subset of SVG path data:

    M/m x y [x y ...]   move to; extra pairs are implicit line-to
    L/l x y [x y ...]   line to
    Z/z                 close subpath

Lowercase commands are relative to the current point. Anything else (curves,
arcs, H/V) is reported as UnsupportedPathCommandError and skipped together
with its arguments; the rest of the path is still traced.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sceneplay.errors import UnsupportedPathCommandError
from sceneplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PATH)

_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

SUPPORTED = frozenset("MmLlZz")


@dataclass(frozen=True)
class PathCommand:
    """One absolute drawing step: op is "M", "L" or "Z" (Z has no coordinates)"""

    op: str
    x: float = 0.0
    y: float = 0.0


def _tokenize(data: str) -> List[str]:
    return _TOKEN_RE.findall(data or "")


def _group(tokens: List[str], start: int) -> Tuple[List[float], int]:
    """Collect consecutive numbers from start; return them and the next index"""
    numbers = []
    index = start
    while index < len(tokens) and not tokens[index].isalpha():
        numbers.append(float(tokens[index]))
        index += 1
    return numbers, index


def parse_path(data: str, issues: Optional[List[UnsupportedPathCommandError]] = None, layer_id: Optional[str] = None) -> List[PathCommand]:
    """
    Parse path data into absolute M/L/Z commands.

    Args:
        data: Path string, e.g. "M 10 10 L 50 10 L 30 40 Z"
        issues: Optional list; skipped commands are appended here
        layer_id: Reported with each issue

    Returns:
        Commands that can be traced, in order
    """
    tokens = _tokenize(data)
    commands: List[PathCommand] = []
    cx = cy = 0.0
    sx = sy = 0.0

    def report(command: str, reason: str) -> None:
        error = UnsupportedPathCommandError(command, reason=reason, layer_id=layer_id)
        log.warn(error.message, layer=layer_id)
        if issues is not None:
            issues.append(error)

    index = 0
    if tokens and not tokens[0].isalpha():
        _, index = _group(tokens, 0)
        report(tokens[0], "coordinates before any command")

    while index < len(tokens):
        letter = tokens[index]
        numbers, index = _group(tokens, index + 1)

        if letter not in SUPPORTED:
            report(letter, "unsupported command")
            continue

        if letter in "Zz":
            if numbers:
                report(letter, "close path takes no coordinates")
            commands.append(PathCommand("Z"))
            cx, cy = sx, sy
            continue

        if len(numbers) < 2:
            report(letter, "missing coordinates")
            continue
        if len(numbers) % 2:
            report(letter, "incomplete coordinate pair")

        relative = letter.islower()
        for pair_index in range(len(numbers) // 2):
            x, y = numbers[2 * pair_index], numbers[2 * pair_index + 1]
            if relative:
                x, y = cx + x, cy + y
            op = "M" if letter in "Mm" and pair_index == 0 else "L"
            commands.append(PathCommand(op, x, y))
            cx, cy = x, y
            if op == "M":
                sx, sy = x, y

    return commands


def trace_path(surface, commands: List[PathCommand]) -> None:
    """Replay parsed commands onto a DrawingSurface's current path"""
    for command in commands:
        if command.op == "M":
            surface.move_to(command.x, command.y)
        elif command.op == "L":
            surface.line_to(command.x, command.y)
        else:
            surface.close_path()
