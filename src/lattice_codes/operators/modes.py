"""
Mode Table
==========

Maps CLI mode strings onto (policy, topology) pairs, once, up front.

    "{tag}:{family}"   e.g. "old:king", "ic:hex", "eodom:tmb"

Tag -> (policy, closed neighbourhoods?):

    dom  odom      DOM   closed / open
    edom eodom     EDOM  closed / open     (exact detector count goal)
    ld             LD    open
    ic   old       OLD   closed / open
    redic red      RED   closed / open
    detic det      DET   closed / open
    erric err      ERR   closed / open

New combinations are new rows here, not new branches in the solvers.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from .adjacency import Topology, get_topology, FAMILIES
from .codesets import Policy

MODE_TAGS: Dict[str, Tuple[Policy, bool]] = {
    "dom": (Policy.DOM, True),
    "odom": (Policy.DOM, False),
    "edom": (Policy.EDOM, True),
    "eodom": (Policy.EDOM, False),
    "ld": (Policy.LD, False),
    "ic": (Policy.OLD, True),
    "redic": (Policy.RED, True),
    "detic": (Policy.DET, True),
    "erric": (Policy.ERR, True),
    "old": (Policy.OLD, False),
    "red": (Policy.RED, False),
    "det": (Policy.DET, False),
    "err": (Policy.ERR, False),
}


class UnknownModeError(ValueError):
    """Mode string does not name a supported combination."""


@dataclass(frozen=True)
class Mode:
    """A resolved mode: which codes are legal, and on which lattice."""
    tag: str
    policy: Policy
    topology: Topology

    @property
    def exact_goal(self) -> bool:
        """Exact-count policies take an integer goal instead of a fraction."""
        return self.policy is Policy.EDOM

    def __str__(self) -> str:
        return f"{self.tag}:{self.topology.family}"


def parse_mode(text: str, allow_exact: bool = True) -> Mode:
    """
    Resolve "tag:family" into a Mode.

    Args:
        text: mode string from the command line
        allow_exact: if False, reject the exact-count tags (edom, eodom)

    Raises:
        UnknownModeError: malformed string, unknown tag or family
    """
    tag, sep, family = text.partition(":")
    if not sep or tag not in MODE_TAGS or family not in FAMILIES:
        raise UnknownModeError(f"unknown type: {text}")
    policy, closed = MODE_TAGS[tag]
    if policy is Policy.EDOM and not allow_exact:
        raise UnknownModeError(f"unknown type: {text}")
    return Mode(tag, policy, get_topology(family, closed))


def parse_graph_mode(text: str) -> Policy:
    """Resolve a finite-graph mode (a bare policy tag: old, red, det, err)."""
    try:
        policy = Policy(text)
    except ValueError:
        raise UnknownModeError(f"unknown type: {text}")
    if not policy.supports_finite_graphs:
        raise UnknownModeError(f"unknown type: {text}")
    return policy
