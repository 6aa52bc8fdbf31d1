"""Path description parser.

Turns a compact path string into an ordered list of polylines. The vocabulary
is SVG-like:

- ``M x y``: move to, starting a new polyline (extra pairs are line-tos)
- ``L x y``: line to
- ``Q cx cy x y``: quadratic curve, flattened to line segments
- ``C c1x c1y c2x c2y x y``: cubic curve, flattened to line segments
- ``Z``: close the current polyline

Lower-case commands take coordinates relative to the current pen position.

Parsing is lenient by default: malformed tokens, incomplete coordinate groups
and unknown commands are skipped and reported as issues. With ``strict=True``
the first such problem raises MalformedPathError instead.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import structlog

from strokefont.core._bezier import flatten_cubic, flatten_quadratic
from strokefont.domain import Point, Polyline
from strokefont.exceptions import MalformedPathError

logger = structlog.get_logger(__name__)

# Coordinate pairs consumed per repetition of each command
COMMAND_PAIRS: dict[str, int] = {"M": 1, "L": 1, "Q": 2, "C": 3, "Z": 0}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_CHUNK_RE = re.compile(r"[^\s,]+")


@dataclass
class ParseResult:
    """Outcome of parsing one path description.

    Attributes:
        polylines: Non-empty polylines in input order
        issues: Human-readable descriptions of skipped input
    """

    polylines: list[Polyline] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)


def tokenize(data: str) -> Iterator[str | float]:
    """Split path data into command letters, numbers and malformed tokens.

    Each whitespace/comma separated chunk is scanned left to right. Command
    letters and numbers may be packed together (``L1-2``); the first character
    that starts neither ends the chunk and the remainder is yielded as one
    malformed token, wrapped in angle brackets.

    Yields:
        Single-letter command strings, floats, or ``"<junk>"`` strings
    """
    for chunk_match in _CHUNK_RE.finditer(data):
        chunk = chunk_match.group()
        pos = 0
        while pos < len(chunk):
            char = chunk[pos]
            if char.upper() in COMMAND_PAIRS:
                yield char
                pos += 1
                continue

            number = _NUMBER_RE.match(chunk, pos)
            if number is not None:
                yield float(number.group())
                pos = number.end()
                continue

            yield f"<{chunk[pos:]}>"
            break


class PathParser:
    """Parses path descriptions into polylines.

    Example:
        parser = PathParser(flip_y=True)
        result = parser.parse("M0 0L1 0L1 1")
        for polyline in result.polylines:
            print(len(polyline))
    """

    def __init__(
        self,
        flip_y: bool = True,
        flatten_tolerance: float = 0.002,
        strict: bool = False,
    ) -> None:
        """Initialize the parser.

        Args:
            flip_y: Source data is y-down; store ``1 - y`` so output is y-up
            flatten_tolerance: Maximum curve deviation when flattening
            strict: Raise MalformedPathError instead of skipping bad input
        """
        self.flip_y = flip_y
        self.flatten_tolerance = flatten_tolerance
        self.strict = strict

    def parse(self, data: str, character: str | None = None) -> ParseResult:
        """Parse a path description.

        Args:
            data: Path description string
            character: Character being parsed, used in issue reports

        Returns:
            ParseResult with polylines and any skipped-input issues

        Raises:
            MalformedPathError: In strict mode, on the first malformed input
        """
        state = _ParseState(self, character)

        command: str | None = None
        numbers: list[float] = []
        for token in tokenize(data):
            if isinstance(token, float):
                numbers.append(token)
            elif token.startswith("<"):
                state.report(f"skipped malformed token {token[1:-1]!r}")
            else:
                if command is not None:
                    state.apply(command, numbers)
                elif numbers:
                    state.report("coordinates before first command")
                command = token
                numbers = []

        if command is not None:
            state.apply(command, numbers)
        elif numbers:
            state.report("coordinates before first command")

        state.flush()
        return ParseResult(polylines=state.polylines, issues=state.issues)


class _ParseState:
    """Pen and polyline bookkeeping for one parse call.

    The pen is tracked in source coordinates; points are flipped only when
    they are stored.
    """

    def __init__(self, parser: PathParser, character: str | None) -> None:
        self.parser = parser
        self.character = character
        self.polylines: list[Polyline] = []
        self.issues: list[str] = []
        self.current: list[tuple[float, float]] | None = None
        self.pen: tuple[float, float] | None = None
        self.start: tuple[float, float] | None = None

    def report(self, reason: str) -> None:
        if self.parser.strict:
            raise MalformedPathError(self.character, reason)
        logger.warning("Malformed path data skipped", character=self.character, reason=reason)
        self.issues.append(reason)

    def flush(self, closed: bool = False) -> None:
        if self.current:
            self.polylines.append(
                Polyline(points=tuple(self._to_point(p) for p in self.current), closed=closed)
            )
        self.current = None

    def apply(self, command: str, numbers: list[float]) -> None:
        kind = command.upper()
        relative = command.islower()
        pairs_needed = COMMAND_PAIRS[kind]

        if kind == "Z":
            if numbers:
                self.report(f"ignored {len(numbers)} coordinate(s) after close")
            self.close()
            return

        group_size = pairs_needed * 2
        usable = len(numbers) - len(numbers) % group_size
        if usable == 0:
            self.report(f"'{command}' without a complete coordinate group")
            return
        if usable < len(numbers):
            self.report(f"'{command}' has {len(numbers) - usable} trailing coordinate(s)")

        for index in range(0, usable, group_size):
            group = numbers[index:index + group_size]
            origin = self.pen if relative and self.pen is not None else (0.0, 0.0)
            coords = [
                (group[i] + origin[0], group[i + 1] + origin[1])
                for i in range(0, group_size, 2)
            ]

            if kind == "M" and index == 0:
                self.move_to(coords[0])
            elif kind in ("M", "L"):
                self.line_to(coords[0])
            else:
                self.curve_to(coords)

    def move_to(self, point: tuple[float, float]) -> None:
        self.flush()
        self.current = [point]
        self.pen = point
        self.start = point

    def line_to(self, point: tuple[float, float]) -> None:
        if self.current is None:
            # Implicit open: continue from the pen if there is one.
            self.current = [self.pen] if self.pen is not None else []
            self.start = self.current[0] if self.current else point
        self.current.append(point)
        self.pen = point

    def curve_to(self, coords: list[tuple[float, float]]) -> None:
        if self.pen is None:
            self.report("curve without a current point")
            return

        p0 = Point(*self.pen)
        controls = [Point(*c) for c in coords]
        tolerance = self.parser.flatten_tolerance
        if len(controls) == 2:
            flattened = flatten_quadratic(p0, controls[0], controls[1], tolerance)
        else:
            flattened = flatten_cubic(p0, controls[0], controls[1], controls[2], tolerance)

        for point in flattened:
            self.line_to(point.to_tuple())

    def close(self) -> None:
        if self.current:
            self.flush(closed=True)
        if self.start is not None:
            self.pen = self.start

    def _to_point(self, coords: tuple[float, float]) -> Point:
        x, y = coords
        if self.parser.flip_y:
            y = 1.0 - y
        return Point(x, y)


def parse_path(
    data: str,
    flip_y: bool = True,
    flatten_tolerance: float = 0.002,
    strict: bool = False,
) -> list[Polyline]:
    """Parse a path description into polylines.

    Convenience wrapper around PathParser that drops the issue list.

    Args:
        data: Path description string
        flip_y: Source data is y-down
        flatten_tolerance: Maximum curve deviation when flattening
        strict: Raise on malformed input

    Returns:
        Non-empty polylines in input order
    """
    parser = PathParser(flip_y=flip_y, flatten_tolerance=flatten_tolerance, strict=strict)
    return parser.parse(data).polylines


def format_number(value: float) -> str:
    """Format a coordinate with at most 6 decimals and no negative zero."""
    rounded = round(value, 6)
    if rounded == 0:
        return "0"
    return f"{rounded:.6f}".rstrip("0").rstrip(".")


def serialize_polylines(polylines: Iterable[Polyline], flip_y: bool = True) -> str:
    """Write polylines back to path description form.

    Args:
        polylines: Polylines to serialize
        flip_y: Write y-down coordinates (inverse of the parser's flip)

    Returns:
        Path string such as ``"M0 1 L1 1 Z"``
    """
    parts: list[str] = []
    for polyline in polylines:
        if polyline.is_empty():
            continue

        for index, point in enumerate(polyline.points):
            y = 1.0 - point.y if flip_y else point.y
            command = "M" if index == 0 else "L"
            parts.append(f"{command}{format_number(point.x)} {format_number(y)}")

        if polyline.closed:
            parts.append("Z")

    return " ".join(parts)
