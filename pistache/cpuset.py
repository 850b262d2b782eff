"""A fixed-size set of CPU numbers, for pinning threads to processors."""

from __future__ import annotations

import os
from typing import FrozenSet, Iterable, Iterator, Union

CpuSpec = Union[int, Iterable[int]]


def hardware_concurrency() -> int:
    """The number of processors, or 0 when it cannot be told."""
    return os.cpu_count() or 0


def _expand(args) -> Iterator[int]:
    for arg in args:
        if isinstance(arg, int):
            yield arg
        else:
            yield from arg


class CpuSet:
    """CPU numbers from 0 up to, but not including, SIZE."""

    SIZE = 1024

    def __init__(self, cpus: Iterable[int] = ()):
        self._cpus = set()
        self.set(cpus)

    def clear(self) -> None:
        self._cpus.clear()

    def _check(self, cpu: int, action: str) -> None:
        if not 0 <= cpu < self.SIZE:
            raise ValueError(f"Trying to {action} invalid cpu number")

    def set(self, *args: CpuSpec) -> "CpuSet":
        for cpu in _expand(args):
            self._check(cpu, "set")
            self._cpus.add(cpu)
        return self

    def unset(self, *args: CpuSpec) -> "CpuSet":
        for cpu in _expand(args):
            self._check(cpu, "unset")
            self._cpus.discard(cpu)
        return self

    def set_range(self, begin: int, end: int) -> "CpuSet":
        if begin > end:
            raise ValueError("Invalid range, begin > end")
        return self.set(range(begin, end))

    def unset_range(self, begin: int, end: int) -> "CpuSet":
        if begin > end:
            raise ValueError("Invalid range, begin > end")
        return self.unset(range(begin, end))

    def is_set(self, cpu: int) -> bool:
        self._check(cpu, "test")
        return cpu in self._cpus

    def count(self) -> int:
        return len(self._cpus)

    def to_posix(self) -> FrozenSet[int]:
        """The CPUs in the form ``os.sched_setaffinity`` takes."""
        return frozenset(self._cpus)

    def __contains__(self, cpu: int) -> bool:
        return cpu in self._cpus

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._cpus))

    def __len__(self) -> int:
        return len(self._cpus)

    def __eq__(self, other):
        if not isinstance(other, CpuSet):
            return NotImplemented
        return self._cpus == other._cpus

    def __repr__(self) -> str:
        return f"CpuSet({sorted(self._cpus)!r})"