"""General helpers: argument scanning, string and list handling, array statistics, randomness."""

from __future__ import annotations

import math
import random
import re
import time
from collections.abc import MutableSequence, Sequence

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_FLOAT_FULL = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def what_time_is_it_now() -> float:
    """Wall-clock time in seconds."""
    return time.time()


def read_intlist(text: str | None, default: int) -> list[int]:
    """Parse a comma separated list of integers, or give ``[default]`` when there is none."""
    if not text:
        return [default]
    return [_atoi(piece) for piece in text.split(",")]


def read_map(filename: str) -> list[int]:
    """Read one integer per line from a file."""
    with open(filename, encoding="utf-8") as handle:
        return [_atoi(line.rstrip("\n")) for line in handle]


def read_file(filename: str) -> bytes:
    """Return the whole content of a file."""
    with open(filename, "rb") as handle:
        return handle.read()


def random_index_order(low: int, high: int) -> list[int]:
    """Return the integers in ``[low, high)`` in random order."""
    indexes = list(range(low, high))
    count = len(indexes)
    for i in range(count - 1):
        pick = i + random.randrange(count - i)
        indexes[i], indexes[pick] = indexes[pick], indexes[i]
    return indexes


def find_arg(argv: list[str], arg: str) -> bool:
    """Remove a flag from ``argv`` and tell whether it was present."""
    try:
        argv.remove(arg)
    except ValueError:
        return False
    return True


def _take_option(argv: list[str], arg: str) -> str | None:
    for i, item in enumerate(argv[:-1]):
        if item == arg:
            value = argv[i + 1]
            del argv[i : i + 2]
            return value
    return None


def find_int_arg(argv: list[str], arg: str, default: int) -> int:
    """Remove ``arg`` and its value from ``argv`` and return the value as an int."""
    value = _take_option(argv, arg)
    return default if value is None else _atoi(value)


def find_float_arg(argv: list[str], arg: str, default: float) -> float:
    """Remove ``arg`` and its value from ``argv`` and return the value as a float."""
    value = _take_option(argv, arg)
    return default if value is None else _atof(value)


def find_char_arg(argv: list[str], arg: str, default: str | None) -> str | None:
    """Remove ``arg`` and its value from ``argv`` and return the value."""
    value = _take_option(argv, arg)
    return default if value is None else value


def basecfg(cfgfile: str) -> str:
    """Base name of a path, cut at its first dot."""
    base = cfgfile.rsplit("/", 1)[-1]
    return base.split(".", 1)[0]


def alphanum_to_int(c: str) -> int:
    code = ord(c)
    return code - 48 if code < 58 else code - 87


def int_to_alphanum(i: int) -> str:
    if i == 36:
        return "."
    return chr(i + 48) if i < 10 else chr(i + 87)


def find_replace(text: str, orig: str, rep: str) -> str:
    """Replace the first occurrence of ``orig`` in ``text``."""
    return text.replace(orig, rep, 1)


def top_k(values: Sequence[float], k: int) -> list[int]:
    """Indexes of the ``k`` largest values, best first; -1 pads a short input."""
    order = sorted(range(len(values)), key=lambda i: -values[i])[:k]
    return order + [-1] * (k - len(order))


def strip(text: str) -> str:
    """Remove every space, tab and newline."""
    return "".join(c for c in text if c not in " \t\n")


def strip_char(text: str, bad: str) -> str:
    return text.replace(bad, "")


def split_str(text: str, delim: str) -> list[str]:
    return text.split(delim)


def parse_csv_line(line: str) -> list[str]:
    """Split a CSV line on commas that are not inside double quotes."""
    fields: list[str] = []
    start = 0
    quoted = False
    for pos, c in enumerate(line):
        if c == '"':
            quoted = not quoted
        elif c == "," and not quoted:
            fields.append(line[start:pos])
            start = pos + 1
    fields.append(line[start:])
    return fields


def count_fields(line: str) -> int:
    return line.count(",") + 1


def _parse_field(field: str) -> float:
    if field.endswith("\r"):
        field = field[:-1]
    if not field:
        return math.nan
    match = _FLOAT_FULL.match(field)
    if match is None or match.end() != len(field):
        return math.nan
    return float(field)


def parse_fields(line: str, n: int) -> list[float]:
    """Parse ``n`` comma separated numbers; empty or malformed fields are NaN."""
    parsed = [_parse_field(field) for field in line.split(",")][:n]
    return parsed + [0.0] * (n - len(parsed))


def sum_array(values: Sequence[float]) -> float:
    return float(sum(values))


def mean_array(values: Sequence[float]) -> float:
    if len(values) == 0:
        return math.nan
    return sum_array(values) / len(values)


def mean_arrays(arrays: Sequence[Sequence[float]]) -> list[float]:
    """Element-wise mean of equally long arrays."""
    count = len(arrays)
    return [sum(column) / count for column in zip(*arrays)]


def variance_array(values: Sequence[float]) -> float:
    if len(values) == 0:
        return math.nan
    mean = mean_array(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def mse_array(values: Sequence[float]) -> float:
    """Root of the mean of the squares."""
    if len(values) == 0:
        return math.nan
    return math.sqrt(sum(v * v for v in values) / len(values))


def print_statistics(values: Sequence[float]) -> None:
    print(
        f"MSE: {mse_array(values):.6f}, Mean: {mean_array(values):.6f}, "
        f"Variance: {variance_array(values):.6f}"
    )


def constrain_int(a: int, low: int, high: int) -> int:
    if a < low:
        return low
    if a > high:
        return high
    return a


def constrain(low: float, high: float, a: float) -> float:
    if a < low:
        return low
    if a > high:
        return high
    return a


def dist_array(a: Sequence[float], b: Sequence[float], sub: int) -> float:
    """Euclidean distance over every ``sub``-th element."""
    return math.sqrt(sum((a[i] - b[i]) ** 2 for i in range(0, len(a), sub)))


def normalize_array(values: Sequence[float]) -> list[float]:
    """Shift and scale to zero mean and unit variance."""
    mu = mean_array(values)
    sigma = math.sqrt(variance_array(values))
    return [(v - mu) / sigma for v in values]


def translate_array(values: Sequence[float], s: float) -> list[float]:
    return [v + s for v in values]


def mag_array(values: Sequence[float]) -> float:
    return math.sqrt(sum(v * v for v in values))


def scale_array(values: Sequence[float], s: float) -> list[float]:
    return [v * s for v in values]


def sample_array(values: Sequence[float]) -> int:
    """Draw an index with probability proportional to its weight."""
    total = sum_array(values)
    r = rand_uniform(0, 1)
    for i, v in enumerate(values):
        r -= v / total
        if r <= 0:
            return i
    return len(values) - 1


def max_index(values: Sequence[float]) -> int:
    """Index of the first largest value, or -1 when empty."""
    if len(values) == 0:
        return -1
    best = 0
    for i, v in enumerate(values):
        if v > values[best]:
            best = i
    return best


def max_int_index(values: Sequence[int]) -> int:
    return max_index(values)


def int_index(values: Sequence[int], val: int) -> int:
    """Position of ``val``, or -1 when absent."""
    for i, v in enumerate(values):
        if v == val:
            return i
    return -1


def rand_int(low: int, high: int) -> int:
    """Random integer in the closed range, bounds in either order."""
    if high < low:
        low, high = high, low
    return random.randint(low, high)


class _NormalSource:
    """Box-Muller sampler that keeps its spare value between calls."""

    def __init__(self) -> None:
        self._spare: tuple[float, float] | None = None

    def __call__(self) -> float:
        if self._spare is not None:
            radius, angle = self._spare
            self._spare = None
            return math.sqrt(radius) * math.sin(angle)
        rand1 = max(random.random(), 1e-100)
        radius = -2 * math.log(rand1)
        angle = random.random() * 2 * math.pi
        self._spare = (radius, angle)
        return math.sqrt(radius) * math.cos(angle)


_normal = _NormalSource()


def rand_normal() -> float:
    """Sample from the standard normal distribution."""
    return _normal()


def rand_size_t() -> int:
    """Random unsigned 64-bit integer."""
    return random.getrandbits(64)


def rand_uniform(low: float, high: float) -> float:
    if high < low:
        low, high = high, low
    return random.random() * (high - low) + low


def rand_scale(s: float) -> float:
    """Random factor between 1 and ``s``, inverted half of the time."""
    scale = rand_uniform(1, s)
    if random.getrandbits(1):
        return scale
    return 1.0 / scale


def one_hot_encode(values: Sequence[float], k: int) -> list[list[float]]:
    rows = []
    for v in values:
        row = [0.0] * k
        row[int(v)] = 1.0
        rows.append(row)
    return rows


def _fill(target: MutableSequence[float], values: Sequence[float]) -> None:
    target[:] = values