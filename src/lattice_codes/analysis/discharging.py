"""
Discharging Lower Bound
=======================

Certified lower bound on the density of any covering code of a given class
on an infinite periodic lattice.

SHARE:
    For a detector p, every neighbour x of p spreads one unit of coverage
    evenly over the detectors in its code, so p is charged

        share(p) = sum over x in N(p) of 1 / max(|code(x)|, MIN_DOM)

    Total charge equals the number of positions, so if every detector's
    share is at most T the detector density is at least 1/T.

RINGS (per center c, recomputed for each center):
    closed_interior   radius <= 2 (closed)
    open_interior     closed_interior minus c
    exterior          exactly radius 3
    farlands          exactly radius 4
    boundary_map      open_interior position next to the exterior ->
                        closelands: its open neighbours outside open_interior
                        farlands:   farlands within reach of its closelands

SEARCH (three nested layers, each gating the next):
    1. interior   every assignment of open_interior (c is a detector).
                  A leaf counts when the closed radius-1 neighbourhood of c
                  is valid; its share is the naive share of c.
    2. exterior   only when that share exceeds T: every assignment of the
                  exterior. Detector neighbours of c ("averagees") collect
                  their highest share over valid second-order leaves. Any
                  averagee reaching T is dropped with its closed neighbours.
                  Stops as soon as no averagee survives.
    3. farlands   for a boundary detector next to a surviving averagee whose
                  naive share exceeds T: maximum share over every farlands
                  assignment valid on closed_interior + closelands. If that
                  still exceeds T, the averagees next to it are dropped.

    The averaged share (center + surviving averagees) / (1 + count) replaces
    the naive share when it is within T. The published bound is the maximum
    share over all leaves and centers.

EXACT OUTPUT:
    Shares have denominators <= 9, and averages of them are reported through
    lcm(1..9) = 2520: v = round(highest * 2520), bound = 2520/v reduced.

NOTE: this is exhaustive. King-family modes take a long time.
"""

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Sequence, Set, TextIO

from ..builders.geometry import Geometry
from ..log import get_logger
from ..operators.modes import Mode
from ..spec.constants import SHARE_LCM
from ..spec.structures import Position

logger = get_logger("lattice_codes.analysis.discharging")


@dataclass(frozen=True)
class LowerBound:
    """
    Result of a discharging run.

    The density lower bound is numerator/denominator = 1/highest_share.
    A run with no locally valid configuration has highest_share == 0 and
    denominator == 0.
    """
    numerator: int
    denominator: int
    highest_share: float

    @property
    def is_feasible(self) -> bool:
        return self.highest_share > 0

    @property
    def density(self) -> Fraction:
        if not self.is_feasible:
            raise ValueError("no locally valid configuration: density bound undefined")
        return Fraction(self.numerator, self.denominator)

    @property
    def reciprocal(self) -> float:
        """1/highest_share, the float form of the bound."""
        if not self.is_feasible:
            return math.inf
        return 1.0 / self.highest_share


@dataclass
class _Lands:
    closelands: List[Position]
    farlands: List[Position]


def lower_bound_from_share(highest: float) -> LowerBound:
    """Round highest*2520 half-up and reduce 2520/v by the gcd."""
    v = int(math.floor(highest * SHARE_LCM + 0.5))
    d = math.gcd(v, SHARE_LCM)
    return LowerBound(SHARE_LCM // d, v // d, highest)


class LowerBoundSearcher:
    """
    Discharging search for one mode.

    Usage:
        searcher = LowerBoundSearcher(parse_mode("old:king", allow_exact=False))
        bound = searcher.calc(3.5, pipe=sys.stdout)
    """

    def __init__(self, mode: Mode):
        self.mode = mode
        self.topology = mode.topology
        self._open = mode.topology.open
        self._closed = mode.topology.closed
        self._min_dom = mode.policy.min_dom
        self.codes = mode.policy.new_codes()

        self.center: Position = (0, 0)
        self.closed_interior: List[Position] = []
        self.open_interior: List[Position] = []
        self.exterior: List[Position] = []
        self.boundary_map: Dict[Position, _Lands] = {}
        self.detectors: Set[Position] = set()
        self.averagees: Dict[Position, float] = {}

        self.highest = 0.0
        self.thresh = 0.0
        self.pipe: Optional[TextIO] = None

    # =========================================================================
    # Codes and shares
    # =========================================================================

    def code(self, pos: Position) -> List[Position]:
        detectors = self.detectors
        return [p for p in self.topology.neighbors(pos) if p in detectors]

    def code_size(self, pos: Position) -> int:
        detectors = self.detectors
        return sum(1 for p in self.topology.neighbors(pos) if p in detectors)

    def valid_over_append(self, positions: Iterable[Position]) -> bool:
        """Commit every position's code on top of what is already recorded."""
        for p in positions:
            if not self.codes.commit(p in self.detectors, self.code(p)):
                return False
        return True

    def valid_over(self, positions: Iterable[Position]) -> bool:
        self.codes.reset()
        return self.valid_over_append(positions)

    def share(self, pos: Position) -> float:
        """Naive share of detector pos under the current assignment."""
        if pos not in self.detectors:
            raise ValueError(f"share requested for non-detector {pos}")
        total = 0.0
        for p in self.topology.neighbors(pos):
            total += 1.0 / max(self.code_size(p), self._min_dom)
        return total

    # =========================================================================
    # Rings
    # =========================================================================

    def build_rings(self, center: Position) -> None:
        """Recompute every ring around center; nothing carries over from a previous center."""
        open_nb = self._open.neighbors
        closed_nb = self._closed.neighbors

        closed_interior = {q for p in open_nb(center) for q in closed_nb(p)}
        open_interior = closed_interior - {center}
        exterior = {q for p in open_interior for q in open_nb(p)} - closed_interior
        farlands = {q for p in exterior for q in open_nb(p)} - closed_interior - exterior

        self.center = center
        self.closed_interior = sorted(closed_interior)
        self.open_interior = sorted(open_interior)
        self.exterior = sorted(exterior)

        self.boundary_map = {}
        for p in self.open_interior:
            if not any(x in exterior for x in open_nb(p)):
                continue
            close = sorted({x for x in open_nb(p) if x not in open_interior})
            far = sorted({y for x in close for y in open_nb(x) if y in farlands})
            self.boundary_map[p] = _Lands(close, far)

        logger.debug(
            "discharging_rings_built",
            center=center,
            interior=len(self.open_interior),
            exterior=len(self.exterior),
            farlands=len(farlands),
            boundary=len(self.boundary_map),
        )

    # =========================================================================
    # Layer 3: farlands
    # =========================================================================

    def _boundary_share_recursive(self, pos: Position, far: Sequence[Position], i: int) -> float:
        if i == len(far):
            # -1 marks a farlands assignment that is impossible in the first place
            if not self.valid_over(self.closed_interior):
                return -1.0
            if not self.valid_over_append(self.boundary_map[pos].closelands):
                return -1.0
            return self.share(pos)

        q = far[i]
        self.detectors.add(q)
        res1 = self._boundary_share_recursive(pos, far, i + 1)
        self.detectors.discard(q)
        if res1 > self.thresh:
            return res1
        res2 = self._boundary_share_recursive(pos, far, i + 1)
        return max(res1, res2)

    def boundary_share(self, pos: Position) -> float:
        """Share of boundary detector pos, refined over its farlands when the naive one exceeds thresh."""
        lands = self.boundary_map[pos]
        trivial = self.share(pos)
        if trivial <= self.thresh:
            return trivial
        return self._boundary_share_recursive(pos, lands.farlands, 0)

    # =========================================================================
    # Layer 2: exterior
    # =========================================================================

    def _exterior_leaf(self) -> bool:
        # second-order impossible: nothing learned, keep searching
        if not self.valid_over(self.closed_interior):
            return True

        averagees = self.averagees
        drops: List[Position] = []
        for x in averagees:
            s = self.share(x)
            if s >= self.thresh:
                drops.extend(self._closed.neighbors(x))
            elif s > averagees[x]:
                averagees[x] = s
        for x in drops:
            averagees.pop(x, None)

        open_nb = self._open.neighbors
        boundary = sorted({
            y for x in averagees for y in open_nb(x)
            if y in self.detectors and y in self.boundary_map
        })
        for p in boundary:
            if not any(x in averagees for x in open_nb(p)):
                continue
            if self.boundary_share(p) > self.thresh:
                for x in open_nb(p):
                    averagees.pop(x, None)

        return bool(averagees)

    def _exterior_recursive(self, i: int) -> bool:
        if i == len(self.exterior):
            return self._exterior_leaf()

        p = self.exterior[i]
        self.detectors.add(p)
        ok = self._exterior_recursive(i + 1)
        self.detectors.discard(p)
        if not ok:
            return False
        return self._exterior_recursive(i + 1)

    def try_average(self, center_share: float) -> Optional[float]:
        """
        Average the center's share with its detector neighbours.

        Returns:
            the averaged share if it is within thresh, 0.0 if the interior
            configuration admits no valid exterior at all, else None
        """
        self.averagees = {p: -1.0 for p in self._open.neighbors(self.center) if p in self.detectors}
        if not self.averagees:
            return None

        if not self._exterior_recursive(0):
            return None

        if any(v < 0.0 for v in self.averagees.values()):
            return 0.0

        avg = (center_share + sum(self.averagees.values())) / (len(self.averagees) + 1)
        return avg if avg <= self.thresh else None

    # =========================================================================
    # Layer 1: interior
    # =========================================================================

    def _interior_leaf(self) -> None:
        if not self.valid_over(self._closed.neighbors(self.center)):
            return

        share = self.share(self.center)
        if share > self.thresh:
            avg = self.try_average(share)
            if avg is not None:
                share = avg

        if share > self.highest:
            self.highest = share
        if share > self.thresh and self.pipe is not None:
            geo = Geometry(self.closed_interior, self.detectors)
            self.pipe.write(f"problem: {share}\ncenter: {self.center}\n{geo}\n")

    def _interior_recursive(self, i: int) -> None:
        if i == len(self.open_interior):
            self._interior_leaf()
            return

        p = self.open_interior[i]
        self.detectors.add(p)
        self._interior_recursive(i + 1)
        self.detectors.discard(p)
        self._interior_recursive(i + 1)

    def calc(
        self,
        thresh: float,
        pipe: Optional[TextIO] = None,
        centers: Optional[Sequence[Position]] = None,
    ) -> LowerBound:
        """
        Run the discharging search.

        Args:
            thresh: discharging threshold T > 0
            pipe: text stream for over-threshold diagnostics (None to discard)
            centers: positions to center on (default: one per topology class)

        Returns:
            LowerBound over all centers
        """
        if not thresh > 0:
            raise ValueError(f"threshold must be > 0, got {thresh}")
        if centers is None:
            centers = self.topology.classes

        self.highest = 0.0
        self.thresh = float(thresh)
        self.pipe = pipe

        for c in centers:
            c = tuple(c)
            self.build_rings(c)
            logger.info("discharging_center_started", mode=str(self.mode), center=c, thresh=self.thresh)

            self.detectors = {c}
            self._interior_recursive(0)

        result = lower_bound_from_share(self.highest)
        logger.info(
            "discharging_finished",
            mode=str(self.mode),
            highest=self.highest,
            numerator=result.numerator,
            denominator=result.denominator,
        )
        return result
