"""Path parsing and normalization.

Turns path descriptions (SVG-style path strings or pre-tokenized
[command, *args] sequences) into canonical paths made only of absolute
MoveTo and CubicTo segments.
"""

import logging
import re
from collections import OrderedDict
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from snapline.config import settings
from snapline.curves import arc_to_curve, line_to_curve, quadratic_to_curve
from snapline.types import CanonicalPath, CubicTo, MoveTo, PathSpec

logger = logging.getLogger(__name__)

Command = list[Any]  # [letter, *float args]

# Number of arguments consumed by each command
PARAM_COUNTS = {"a": 7, "c": 6, "h": 1, "l": 2, "m": 2, "q": 4, "s": 4, "t": 2, "v": 1, "z": 0}

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:e[-+]?\d+)?"
_COMMAND_RE = re.compile(rf"([a-z])[\s,]*((?:{_NUMBER}[\s,]*)*)", re.IGNORECASE)
_NUMBER_RE = re.compile(_NUMBER, re.IGNORECASE)


@dataclass
class PathCache:
    """Bounded least-recently-used cache of normalized paths.

    Mutation is serialized with a lock so one cache can back normalizers
    used from several threads.
    """

    capacity: int = 1000
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    _entries: OrderedDict[Hashable, Any] = field(default_factory=OrderedDict)
    _lock: Lock = field(default_factory=Lock)

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            try:
                value = self._entries[key]
            except KeyError:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Evicted cached path {evicted!r}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries


def _cache_key(spec: PathSpec | None) -> Hashable | None:
    """Exact-value key for a path spec, or None when it cannot be hashed."""
    if spec is None or isinstance(spec, str):
        return spec
    try:
        key = tuple(tuple(entry) for entry in spec)
        hash(key)
    except TypeError:
        return None
    return key


def _is_segment_sequence(spec: Any) -> bool:
    return (
        isinstance(spec, Sequence)
        and not isinstance(spec, str)
        and len(spec) > 0
        and isinstance(spec[0], Sequence)
        and not isinstance(spec[0], str)
    )


def _tokenize_string(path_string: str) -> list[Command]:
    commands: list[Command] = []

    for match in _COMMAND_RE.finditer(path_string):
        letter = match.group(1)
        name = letter.lower()
        params = [float(n) for n in _NUMBER_RE.findall(match.group(2))]

        if name not in PARAM_COUNTS:
            logger.debug(f"Ignoring unknown path command {letter!r}")
            continue

        # Extra coordinate pairs after a move are implicit lines
        if name == "m" and len(params) > 2:
            commands.append([letter, *params[:2]])
            params = params[2:]
            name = "l"
            letter = "l" if letter == "m" else "L"

        count = PARAM_COUNTS[name]
        if count == 0:
            commands.append([letter])
            continue

        while len(params) >= count:
            commands.append([letter, *params[:count]])
            params = params[count:]

    return commands


def _tokenize_sequence(segments: Sequence[Sequence[Any]]) -> list[Command]:
    commands: list[Command] = []

    for entry in segments:
        if not entry or not isinstance(entry[0], str):
            raise ValueError(f"Path segment must start with a command letter: {entry!r}")
        letter = entry[0]
        count = PARAM_COUNTS.get(letter.lower())
        if count is None:
            raise ValueError(f"Unknown path command {letter!r}")
        args = [float(value) for value in entry[1:]]
        if len(args) < count:
            raise ValueError(f"Path command {letter!r} needs {count} arguments, got {len(args)}")
        commands.append([letter, *args[:count]])

    return commands


def _to_absolute(commands: list[Command]) -> list[Command]:
    if not commands:
        return [["M", 0.0, 0.0]]

    result: list[Command] = []
    x = y = 0.0
    mx = my = 0.0
    start = 0

    if commands[0][0] == "M":
        x, y = commands[0][1], commands[0][2]
        mx, my = x, y
        start = 1
        result.append(["M", x, y])

    for command in commands[start:]:
        letter = command[0]
        upper = letter.upper()

        if letter != upper:
            args = command[1:]
            match upper:
                case "A":
                    absolute = ["A", *args[:5], args[5] + x, args[6] + y]
                case "V":
                    absolute = ["V", args[0] + y]
                case "H":
                    absolute = ["H", args[0] + x]
                case _:
                    absolute = [upper] + [
                        value + (x if i % 2 == 0 else y) for i, value in enumerate(args)
                    ]
        else:
            absolute = list(command)

        result.append(absolute)

        match upper:
            case "Z":
                x, y = mx, my
            case "H":
                x = absolute[1]
            case "V":
                y = absolute[1]
            case "M":
                mx, my = absolute[-2], absolute[-1]
                x, y = mx, my
            case _:
                x, y = absolute[-2], absolute[-1]

    return result


def _to_curve(absolute: list[Command]) -> CanonicalPath:
    canonical: CanonicalPath = []
    x = y = 0.0  # current point
    bx = by = 0.0  # last cubic control point
    start_x = start_y = 0.0  # subpath start
    qx: float | None = None  # last quadratic control point
    qy: float | None = None
    previous = ""

    for command in absolute:
        letter = command[0]
        args = command[1:]
        controls: list[float] = []

        if letter not in ("T", "Q"):
            qx = qy = None

        match letter:
            case "M":
                start_x, start_y = args[0], args[1]
                canonical.append(MoveTo(x=start_x, y=start_y))
                x, y = start_x, start_y
                bx, by = x, y
                previous = letter
                continue
            case "A":
                controls = arc_to_curve(x, y, *args)
            case "S":
                if previous in ("C", "S"):
                    nx, ny = x * 2 - bx, y * 2 - by
                else:
                    nx, ny = x, y
                controls = [nx, ny, *args[:4]]
            case "T":
                if previous in ("Q", "T") and qx is not None and qy is not None:
                    qx, qy = x * 2 - qx, y * 2 - qy
                else:
                    qx, qy = x, y
                controls = list(quadratic_to_curve(x, y, qx, qy, args[0], args[1]))
            case "Q":
                qx, qy = args[0], args[1]
                controls = list(quadratic_to_curve(x, y, *args[:4]))
            case "L":
                controls = list(line_to_curve(x, y, args[0], args[1]))
            case "H":
                controls = list(line_to_curve(x, y, args[0], y))
            case "V":
                controls = list(line_to_curve(x, y, x, args[0]))
            case "Z":
                controls = list(line_to_curve(x, y, start_x, start_y))
            case _:
                controls = list(args[:6])

        for i in range(0, len(controls), 6):
            c1x, c1y, c2x, c2y, ex, ey = controls[i : i + 6]
            canonical.append(CubicTo(c1x=c1x, c1y=c1y, c2x=c2x, c2y=c2y, x=ex, y=ey))
            bx, by = c2x, c2y
            x, y = ex, ey

        previous = letter

    return canonical


class PathNormalizer:
    """Parses and normalizes paths, memoizing results per exact input.

    Example:
        normalizer = PathNormalizer()
        normalizer.normalize("M0,0L100,100")
        # [MoveTo(x=0, y=0), CubicTo(c1x=0, c1y=0, c2x=100, c2y=100, x=100, y=100)]
    """

    def __init__(self, cache: PathCache | None = None) -> None:
        self.cache = cache if cache is not None else PathCache(capacity=settings.path_cache_size)

    def _cached(self, kind: str, spec: PathSpec | None) -> Any | None:
        key = _cache_key(spec)
        if key is None:
            return None
        return self.cache.get((kind, key))

    def _store(self, kind: str, spec: PathSpec | None, value: Any) -> None:
        key = _cache_key(spec)
        if key is not None:
            self.cache.put((kind, key), value)

    def parse(self, spec: PathSpec | None) -> list[Command]:
        """Tokenize a path into [command, *args] entries.

        Malformed input yields an empty list.
        """
        cached = self._cached("parsed", spec)
        if cached is not None:
            return [list(command) for command in cached]

        if not spec:
            commands: list[Command] = []
        elif isinstance(spec, str):
            commands = _tokenize_string(spec)
        elif _is_segment_sequence(spec):
            try:
                commands = _tokenize_sequence(spec)
            except (TypeError, ValueError) as e:
                logger.debug(f"Malformed path segments, using empty path: {e}")
                commands = []
        else:
            logger.debug(f"Unsupported path value {spec!r}, using empty path")
            commands = []

        self._store("parsed", spec, tuple(tuple(command) for command in commands))
        return commands

    def to_absolute(self, spec: PathSpec | None) -> list[Command]:
        """Resolve relative commands to absolute coordinates."""
        cached = self._cached("absolute", spec)
        if cached is not None:
            return [list(command) for command in cached]

        absolute = _to_absolute(self.parse(spec))

        self._store("absolute", spec, tuple(tuple(command) for command in absolute))
        return absolute

    def normalize(self, spec: PathSpec | None) -> CanonicalPath:
        """Lower a path to absolute MoveTo/CubicTo segments.

        Never raises on malformed input; an empty or invalid path normalizes
        to a single MoveTo(0, 0).
        """
        cached = self._cached("curve", spec)
        if cached is not None:
            return list(cached)

        canonical = _to_curve(self.to_absolute(spec))

        self._store("curve", spec, tuple(canonical))
        return canonical


default_normalizer = PathNormalizer()


def parse_path_string(spec: PathSpec | None) -> list[Command]:
    """Tokenize a path with the shared normalizer."""
    return default_normalizer.parse(spec)


def path_to_absolute(spec: PathSpec | None) -> list[Command]:
    """Absolute form of a path with the shared normalizer."""
    return default_normalizer.to_absolute(spec)


def normalize_path(spec: PathSpec | None) -> CanonicalPath:
    """Canonical form of a path with the shared normalizer."""
    return default_normalizer.normalize(spec)


path_to_curve = normalize_path


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def path_to_string(path: CanonicalPath | Sequence[Sequence[Any]]) -> str:
    """Serialize a canonical path or command list to compact path text."""
    parts: list[str] = []
    for segment in path:
        command = segment.as_command() if isinstance(segment, (MoveTo, CubicTo)) else segment
        letter, *args = command
        parts.append(letter + ",".join(_format_number(value) for value in args))
    return "".join(parts)
