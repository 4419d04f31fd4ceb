"""Small functional helpers for working with collections and callables."""

from __future__ import annotations

from collections import Counter
from functools import reduce
from typing import Any, Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
S = TypeVar("S")


def pipe(value: Any, *args: Callable[[Any], Any]) -> Any:
    """Pass ``value`` through each function in turn and return the result."""
    return reduce(lambda acc, func: func(acc), args, value)


def apply_if(value: T, condition: bool, func: Callable[[T], T]) -> T:
    """Return ``func(value)`` when ``condition`` holds, otherwise ``value``."""
    return func(value) if condition else value


def apply_if_some(value: T, option: U | None, func: Callable[[T, U], T]) -> T:
    """Return ``func(value, option)`` unless ``option`` is None."""
    return value if option is None else func(value, option)


def group_by(items: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items into lists keyed by ``key_fn``, keeping their order."""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def aggregate(
    items: Iterable[T],
    key_fn: Callable[[T], K],
    agg_fn: Callable[[list[T]], V],
) -> dict[K, V]:
    """Group items by ``key_fn`` and reduce each group with ``agg_fn``."""
    return {key: agg_fn(group) for key, group in group_by(items, key_fn).items()}


def filter_map(items: Iterable[T], func: Callable[[T], U | None]) -> list[U]:
    """Map every item and keep the results that are not None."""
    return [result for result in map(func, items) if result is not None]


def partition(
    items: Iterable[T], predicate: Callable[[T], bool]
) -> tuple[list[T], list[T]]:
    """Split items into those matching ``predicate`` and the rest."""
    matching: list[T] = []
    rest: list[T] = []
    for item in items:
        (matching if predicate(item) else rest).append(item)
    return matching, rest


def scan(
    items: Iterable[T], initial_state: S, func: Callable[[S, T], tuple[S, U]]
) -> list[U]:
    """Map items while threading a state through ``func``.

    ``func`` receives the current state and an item and returns the new
    state together with the value to emit.
    """
    state = initial_state
    results: list[U] = []
    for item in items:
        state, result = func(state, item)
        results.append(result)
    return results


def windowed(items: Iterable[T], size: int) -> list[list[T]]:
    """Return every contiguous window of ``size`` items."""
    sequence = list(items)
    if size <= 0 or len(sequence) < size:
        return []
    return [sequence[start:start + size] for start in range(len(sequence) - size + 1)]


def unique(items: Iterable[T]) -> list[T]:
    """Remove duplicates while keeping the first occurrence of each item."""
    return list(dict.fromkeys(items))


def frequency(items: Iterable[K]) -> Counter:
    """Count how often each item occurs."""
    return Counter(items)


def compose(f: Callable[[Any], Any], g: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Return a function computing ``g(f(x))``."""

    def composed(value: Any) -> Any:
        return g(f(value))

    return composed


def curry2(func: Callable[[Any, Any], Any]) -> Callable[[Any], Callable[[Any], Any]]:
    """Turn a two-argument function into a chain of one-argument functions."""

    def take_first(first: Any) -> Callable[[Any], Any]:
        def take_second(second: Any) -> Any:
            return func(first, second)

        return take_second

    return take_first