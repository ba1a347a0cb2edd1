"""
Placement Solver Tests
======================

Torus, tiled-shape and finite-graph searches on instances small enough to
reason about by hand. Every reported witness is re-checked independently
of the solver.

Run: python -m pytest tests/analysis/test_placement_solvers.py -v
"""

import pytest

from lattice_codes.analysis import TorusSolver, TilingSolver, GraphSolver, solve_torus
from lattice_codes.builders import RectangularTorus, parse_shape, parse_graph
from lattice_codes.operators import Policy, parse_mode
from lattice_codes.spec import Goal


def detector_counts(torus, topology):
    """Per-cell number of detectors in the neighbourhood, using the torus' phase."""
    counts = {}
    for r in range(torus.rows):
        for c in range(torus.cols):
            counts[(r, c)] = sum(torus.is_detector(p) for p in topology.neighbors((r, c)))
    return counts


def lattice_detector(torus, pos):
    """Detector lookup on the infinite lattice the torus tiles, any distance out."""
    shear_col, shear_row = torus.phase
    wraps, r = divmod(pos[0], torus.rows)
    c = pos[1] + wraps * shear_col
    wraps, c = divmod(c, torus.cols)
    r = (r + wraps * shear_row) % torus.rows
    return bool(torus.detectors[r * torus.cols + c])


# =============================================================================
# S1: Torus
# =============================================================================

def test_single_king_detector_covers_3x3():
    """S1.1: one closed-king detector dominates a 3x3 torus; first cell wins."""
    found, torus = solve_torus(3, 3, parse_mode("dom:king"), Goal.meet_or_beat(0.12))
    assert found == 1
    assert torus.detectors.sum() == 1
    assert torus.detectors[0]
    assert torus.phase == (0, 0)


def test_single_king_detector_cannot_cover_4x4():
    """S1.2: nine cells per detector is short of sixteen in every phase."""
    found, torus = solve_torus(4, 4, parse_mode("dom:king"), Goal.meet_or_beat(1 / 16))
    assert found is None
    assert torus.detectors.sum() == 0


def test_perfect_grid_code_5x5():
    """S1.3: edom:grid on 5x5 with exactly 5 detectors is a perfect code."""
    mode = parse_mode("edom:grid")
    torus = RectangularTorus(5, 5)
    found = TorusSolver(torus, mode).try_satisfy(Goal.exactly(5))
    assert found == 5
    assert torus.detectors.sum() == 5
    assert set(detector_counts(torus, mode.topology).values()) == {1}


def test_total_domination_4x4():
    """S1.4: odom:grid at density 1/2 - witness verified cell by cell."""
    mode = parse_mode("odom:grid")
    torus = RectangularTorus(4, 4)
    found = TorusSolver(torus, mode).try_satisfy(Goal.meet_or_beat(0.5))
    assert found == 8
    assert torus.detectors.sum() == 8
    assert min(detector_counts(torus, mode.topology).values()) >= 1


def test_exact_zero_is_unsatisfiable():
    """S1.5: no detectors never dominates."""
    found, _ = solve_torus(3, 3, parse_mode("edom:king"), Goal.exactly(0))
    assert found is None


def test_exact_count_beyond_torus():
    """S1.6: an exact count larger than the torus is rejected up front."""
    torus = RectangularTorus(3, 3)
    with pytest.raises(ValueError, match="exact count"):
        TorusSolver(torus, parse_mode("edom:grid")).try_satisfy(Goal.exactly(10))


def test_old_king_4x4_brute_force():
    """S1.7: old:king 4x4 at 1/2 - every code in a 12x12 window is non-empty and unique."""
    mode = parse_mode("old:king")
    found, torus = solve_torus(4, 4, mode, Goal.meet_or_beat(0.5))
    assert found == 8
    assert torus.detectors.sum() == 8

    window = [(r, c) for r in range(-4, 8) for c in range(-4, 8)]
    codes = [
        frozenset(p for p in mode.topology.neighbors(pos) if lattice_detector(torus, p))
        for pos in window
    ]
    assert all(codes)
    assert len(set(codes)) == len(window)


def test_larger_fraction_stays_satisfiable():
    """S1.8: dom:grid 4x4 - unsatisfiable up to 3 detectors, satisfiable from 4 on."""
    mode = parse_mode("dom:grid")
    satisfiable = []
    for k in range(1, 17):
        found, _ = solve_torus(4, 4, mode, Goal.meet_or_beat(k / 16))
        if found is not None:
            assert found == k
            satisfiable.append(k)
    assert satisfiable == list(range(4, 17))


def test_hex_odd_torus_needs_shear():
    """S1.9: dom:hex 3x3 with 3 detectors is accepted only under a sheared phase."""
    mode = parse_mode("dom:hex")
    found, torus = solve_torus(3, 3, mode, Goal.meet_or_beat(0.34))
    assert found == 3
    assert torus.phase != (0, 0)
    assert torus.phase in torus.phases()

    # every position the search checked is dominated under the accepted phase
    for r in range(-1, 4):
        for c in range(-1, 4):
            assert any(torus.is_detector(p) for p in mode.topology.neighbors((r, c))), (r, c)


# =============================================================================
# S2: Tiled shapes
# =============================================================================

def test_tiled_square_single_detector():
    """S2.1: 3x3 square tile, one closed-king detector at the first cell."""
    tiled = parse_shape("3 0 0 3\nx x x\nx x x\nx x x\n")
    found = TilingSolver(tiled, parse_mode("dom:king")).try_satisfy(Goal.meet_or_beat(0.12))
    assert found == 1
    assert tiled.detectors == {(0, 0)}


def test_tiled_square_too_sparse():
    """S2.2: 4x4 square tile cannot be dominated by one king detector."""
    text = "4 0 0 4\n" + "x x x x\n" * 4
    tiled = parse_shape(text)
    assert TilingSolver(tiled, parse_mode("dom:king")).try_satisfy(Goal.meet_or_beat(1 / 16)) is None
    assert tiled.detectors == set()


def test_tiled_strip_perfect_code():
    """S2.3: a 1x5 strip stacked by (1,2) carries the perfect grid code."""
    tiled = parse_shape("1 2 0 5\nx x x x x\n")
    mode = parse_mode("edom:grid")
    found = TilingSolver(tiled, mode).try_satisfy(Goal.exactly(1))
    assert found == 1
    for pos in tiled.padding:
        seen = sum(tiled.is_detector(p) for p in mode.topology.neighbors(pos))
        assert seen == 1, pos


def test_tiled_exact_count_beyond_shape():
    """S2.4: an exact count larger than the shape is rejected up front."""
    tiled = parse_shape("3 0 0 3\nx x x\nx x x\nx x x\n")
    with pytest.raises(ValueError, match="exact count"):
        TilingSolver(tiled, parse_mode("edom:king")).try_satisfy(Goal.exactly(10))


# =============================================================================
# S3: Finite graphs
# =============================================================================

P4 = "a:b b:c c:d"


def test_path_old_needs_all():
    """S3.1: P4 has an OLD code of size 4 but not of size 3."""
    g = parse_graph(P4)
    solver = GraphSolver(g, Policy.OLD)
    assert solver.find_solution(4)
    assert g.solution() == ["a", "b", "c", "d"]

    assert not solver.find_solution(3)
    assert g.detectors == set()


def test_path_err_impossible():
    """S3.2: leaves of P4 can never see 3 detectors."""
    assert not GraphSolver(parse_graph(P4), Policy.ERR).find_solution(4)


def test_cycle_red_but_not_det():
    """S3.3: C6 with every vertex a detector - distinct 2-sets are RED but not DET."""
    c6 = "1:2 2:3 3:4 4:5 5:6 6:1"
    g = parse_graph(c6)
    assert GraphSolver(g, Policy.RED).find_solution(6)
    assert len(g.solution()) == 6

    # {2, 6} vs {2, 4}: each side differs by a single vertex
    assert not GraphSolver(parse_graph(c6), Policy.DET).find_solution(6)


def test_count_out_of_range():
    """S3.4: counts beyond the vertex set are rejected."""
    with pytest.raises(ValueError, match="count"):
        GraphSolver(parse_graph(P4), Policy.OLD).find_solution(5)


class _CountingSolver(GraphSolver):
    calls = 0

    def _search(self, v):
        self.calls += 1
        return super()._search(v)


def test_count_pruning():
    """S3.5: P4, 3 of 4 - branches that cannot reach the count stop at once."""
    solver = _CountingSolver(parse_graph(P4), Policy.OLD)
    assert not solver.find_solution(3)
    # 29 calls when only the end of the vertex list stops a branch
    assert solver.calls == 19
