"""
Code-Class Policies
===================

Incremental checkers for the seven covering-code definitions.

A "code" is the sorted list of detector neighbours of a position. A policy
decides which (is_detector, code) pairs are admissible, and which pairs of
recorded codes must be told apart.

INTERFACE (shared by all variants):
    reset()                      forget every recorded code
    compatible(is_det, code)     would commit() accept this? (no mutation)
    commit(is_det, code)         accept and record, or reject and leave as is

ORDER INDEPENDENCE:
    Every rule is either a per-code predicate or a symmetric pairwise
    predicate, so committing a fixed multiset of pairs gives the same verdict
    in any order. Row-by-row pruning in the solvers relies on this.

MIN_DOM:
    Smallest code size any admissible position can have. The discharging
    engine divides by max(|code|, MIN_DOM), so it must never be larger than
    what the policy actually guarantees.

    dom   |code| >= 1                                          MIN_DOM 1
    edom  |code| == 1                                          MIN_DOM 1
    ld    non-detectors: |code| >= 1, distinct among themselves MIN_DOM 1
    old   |code| >= 1, distinct among all                       MIN_DOM 1
    red   |code| >= 2, |A ^ B| >= 2                             MIN_DOM 2
    det   |code| >= 2, |A - B| >= 2 or |B - A| >= 2             MIN_DOM 2
    err   |code| >= 3, |A ^ B| >= 3                             MIN_DOM 3
"""

from enum import Enum
from typing import Dict, FrozenSet, Hashable, List, Sequence, Set, Type


class CodeSet:
    """Base checker: accepts everything, records nothing."""

    MIN_DOM = 1

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        pass

    def compatible(self, is_detector: bool, code: Sequence[Hashable]) -> bool:
        return True

    def _record(self, is_detector: bool, code: Sequence[Hashable]) -> None:
        pass

    def commit(self, is_detector: bool, code: Sequence[Hashable]) -> bool:
        if not self.compatible(is_detector, code):
            return False
        self._record(is_detector, code)
        return True


class DominatingSet(CodeSet):
    """Every position sees at least one detector."""

    def compatible(self, is_detector, code):
        return len(code) >= 1


class ExactDominatingSet(CodeSet):
    """Every position sees exactly one detector (perfect code)."""

    def compatible(self, is_detector, code):
        return len(code) == 1


class LocatingDominatingSet(CodeSet):
    """Non-detectors are dominated and pairwise distinguished; detectors are free."""

    def reset(self):
        self._codes: Set[FrozenSet] = set()

    def compatible(self, is_detector, code):
        if is_detector:
            return True
        return len(code) >= 1 and frozenset(code) not in self._codes

    def _record(self, is_detector, code):
        if not is_detector:
            self._codes.add(frozenset(code))


class IdentifyingSet(CodeSet):
    """
    All codes non-empty and distinct.

    With open neighbourhoods this is an open-locating-dominating set (OLD),
    with closed neighbourhoods an identifying code (IC).
    """

    def reset(self):
        self._codes: Set[FrozenSet] = set()

    def compatible(self, is_detector, code):
        return len(code) >= 1 and frozenset(code) not in self._codes

    def _record(self, is_detector, code):
        self._codes.add(frozenset(code))


class _SeparatingSet(CodeSet):
    """Codes of size >= MIN_DOM, every pair passing `_separated`."""

    def reset(self):
        self._codes: List[FrozenSet] = []

    def _separated(self, a: FrozenSet, b: FrozenSet) -> bool:
        raise NotImplementedError

    def compatible(self, is_detector, code):
        if len(code) < self.MIN_DOM:
            return False
        s = frozenset(code)
        return all(self._separated(s, other) for other in self._codes)

    def _record(self, is_detector, code):
        self._codes.append(frozenset(code))


class RedundantSet(_SeparatingSet):
    """Fault tolerant: survives the loss of any single detector."""

    MIN_DOM = 2

    def _separated(self, a, b):
        return len(a ^ b) >= 2


class DetectionSet(_SeparatingSet):
    """Error detecting: a single false alarm or miss is always noticed."""

    MIN_DOM = 2

    def _separated(self, a, b):
        return len(a - b) >= 2 or len(b - a) >= 2


class ErrorCorrectingSet(_SeparatingSet):
    """Error correcting: a single wrong detector reading is repaired."""

    MIN_DOM = 3

    def _separated(self, a, b):
        return len(a ^ b) >= 3


class Policy(Enum):
    """The closed set of covering-code definitions."""
    DOM = "dom"
    EDOM = "edom"
    LD = "ld"
    OLD = "old"
    RED = "red"
    DET = "det"
    ERR = "err"

    @property
    def min_dom(self) -> int:
        return _CODESETS[self].MIN_DOM

    @property
    def supports_finite_graphs(self) -> bool:
        """Policies usable on arbitrary finite graphs."""
        return self in (Policy.OLD, Policy.RED, Policy.DET, Policy.ERR)

    def new_codes(self) -> CodeSet:
        """A fresh, empty checker for this policy."""
        return _CODESETS[self]()


_CODESETS: Dict[Policy, Type[CodeSet]] = {
    Policy.DOM: DominatingSet,
    Policy.EDOM: ExactDominatingSet,
    Policy.LD: LocatingDominatingSet,
    Policy.OLD: IdentifyingSet,
    Policy.RED: RedundantSet,
    Policy.DET: DetectionSet,
    Policy.ERR: ErrorCorrectingSet,
}
