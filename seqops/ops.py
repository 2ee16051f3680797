"""
Sequence operations

Generic helpers over ordered, mutable sequences (lists in practice).

Two kinds of operation live here:

- allocating operations (limit, map_values, map_indexed, filter_values,
  batch, to_opaque_slice) build and return new lists and never touch
  their input
- in-place operations (filter_in_place, unique, delete, reverse, shuffle)
  rewrite the caller's sequence; the ones that shrink it compact the
  kept elements to the front, delete the tail and return the very same
  object, so `seq = delete(seq, x)` and plain `delete(seq, x)` are
  equivalent

None of them raise on degenerate input (empty sequences, predicates that
never match, non-positive sizes). Exceptions raised by caller-supplied
callables propagate unchanged.
"""

import logging
import random
from typing import Any, Callable, List, MutableSequence, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

__all__ = [
    "clamp",
    "limit",
    "map_values",
    "map_indexed",
    "filter_values",
    "filter_in_place",
    "reduce",
    "any_match",
    "all_match",
    "unique",
    "if_else",
    "reverse",
    "shuffle",
    "batch",
    "first",
    "delete",
    "to_opaque_slice",
]


# ---------- scalar helpers ----------

def clamp(value: T, lo: T, hi: T) -> T:
    """Constrain value to the closed range [lo, hi]"""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def if_else(condition: bool, true_value: T, false_value: T) -> T:
    """Return true_value if condition holds, false_value otherwise.

    Both values are already evaluated by the caller; nothing is deferred.
    """
    if condition:
        return true_value
    return false_value


# ---------- allocating operations ----------

def limit(seq: Sequence[T], n: int) -> List[T]:
    """Return a new list with at most the first n elements"""
    if n <= 0:
        return []
    if isinstance(seq, list):
        return seq[:n]
    return list(seq[:n])


def map_values(seq: Sequence[T], fn: Callable[[T], R]) -> List[R]:
    """Apply fn to every element in index order, returning a new list"""
    result = []
    for item in seq:
        result.append(fn(item))
    return result


def map_indexed(seq: Sequence[T], fn: Callable[[int, T], R]) -> List[R]:
    """Like map_values, but fn also receives the zero-based index"""
    result = []
    for i, item in enumerate(seq):
        result.append(fn(i, item))
    return result


def filter_values(seq: Sequence[T], pred: Callable[[T], bool]) -> List[T]:
    """Return a new list with the elements satisfying pred, in order"""
    return [item for item in seq if pred(item)]


def reduce(seq: Sequence[T], initial: R, fn: Callable[[R, T], R]) -> R:
    """Left fold: fn(...fn(fn(initial, seq[0]), seq[1])..., seq[-1])

    An empty sequence returns initial unchanged.
    """
    acc = initial
    for item in seq:
        acc = fn(acc, item)
    return acc


def any_match(seq: Sequence[T], pred: Callable[[T], bool]) -> bool:
    """True if at least one element satisfies pred; stops at the first match"""
    for item in seq:
        if pred(item):
            return True
    return False


def all_match(seq: Sequence[T], pred: Callable[[T], bool]) -> bool:
    """True if every element satisfies pred (vacuously true when empty)"""
    for item in seq:
        if not pred(item):
            return False
    return True


def first(seq: Sequence[T], pred: Callable[[T], bool],
          default: Optional[T] = None) -> Tuple[Optional[T], bool]:
    """Return (element, True) for the first element satisfying pred.

    When nothing matches the result is (default, False); pass default=0,
    default="" etc. to get a typed placeholder back instead of None.
    """
    for item in seq:
        if pred(item):
            return item, True
    return default, False


def batch(seq: Sequence[T], size: int) -> List[List[T]]:
    """Split seq into consecutive chunks of `size` elements.

    The last chunk holds the remainder when len(seq) is not a multiple of
    size. A non-positive size yields no chunks at all.

    >>> batch([1, 2, 3, 4, 5, 6, 7], 3)
    [[1, 2, 3], [4, 5, 6], [7]]
    """
    if size <= 0:
        logger.debug(f"batch size {size} is not positive, returning no chunks")
        return []
    return [list(seq[start:start + size]) for start in range(0, len(seq), size)]


def to_opaque_slice(*elements: Any) -> List[Any]:
    """Pack positional arguments into a list of arbitrary values.

    Element types are erased; consumers narrow them with isinstance().
    """
    return list(elements)


# ---------- in-place operations ----------

def _compact(seq: MutableSequence[T], keep: Callable[[T], bool]) -> MutableSequence[T]:
    # Move kept elements to the front, then drop the tail so the removed
    # references are released right away.
    n = 0
    for i in range(len(seq)):
        item = seq[i]
        if keep(item):
            seq[n] = item
            n += 1
    del seq[n:]
    return seq


def filter_in_place(seq: MutableSequence[T], pred: Callable[[T], bool]) -> MutableSequence[T]:
    """Keep only the elements satisfying pred, reusing seq itself"""
    return _compact(seq, pred)


def delete(seq: MutableSequence[T], value: T) -> MutableSequence[T]:
    """Remove every element equal to value from seq, preserving order"""
    return _compact(seq, lambda item: item != value)


def unique(seq: MutableSequence[T]) -> MutableSequence[T]:
    """Drop repeated values in place, keeping each first occurrence.

    Hashable values are tracked in a set. Unhashable values (lists, dicts)
    are compared by equality against the already-kept prefix, which is
    quadratic but keeps the same semantics.
    """
    if len(seq) <= 1:
        return seq

    seen = set()
    n = 0
    for i in range(len(seq)):
        item = seq[i]
        try:
            if item in seen:
                continue
            seen.add(item)
        except TypeError:
            if any(item == seq[k] for k in range(n)):
                continue
        seq[n] = item
        n += 1
    del seq[n:]
    return seq


def reverse(seq: MutableSequence[T]) -> None:
    """Reverse seq in place with a two-pointer swap"""
    left, right = 0, len(seq) - 1
    while left < right:
        seq[left], seq[right] = seq[right], seq[left]
        left += 1
        right -= 1


def shuffle(seq: MutableSequence[T], rng: Optional[random.Random] = None) -> None:
    """Randomly permute seq in place (Fisher-Yates).

    rng defaults to the process-wide generator of the random module, so
    results are only reproducible after random.seed(). Pass a dedicated
    random.Random for an isolated, seedable stream; a Random instance
    shared between threads must be synchronised by the caller.
    """
    randrange = rng.randrange if rng is not None else random.randrange
    for i in range(len(seq) - 1, 0, -1):
        j = randrange(i + 1)
        seq[i], seq[j] = seq[j], seq[i]
