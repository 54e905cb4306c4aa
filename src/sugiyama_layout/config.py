"""Layout configuration.

Graph-level options are looked up case-insensitively (``nodeSep``, ``nodesep``
and ``node_sep`` name the same option) and resolved once per ``layout`` call
into a ``LayoutConfig``. Out-of-range values fall back to the documented
default with a warning, so a bad option never aborts a layout.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Crossing minimisation stops after this many sweeps without a better layering.
ORDER_MAX_STALE_SWEEPS: int = 4


class _Choice(str, Enum):
    @classmethod
    def parse(cls, value: Any, default: Any) -> Any:
        """Resolve ``value`` to a member, or return ``default`` when it is unset or unknown."""
        if value is None or value == "":
            return default
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown %s '%s', using %s", cls.__name__, value, getattr(default, "value", default))
            return default


class RankDir(_Choice):
    """Direction in which ranks advance."""

    TB = "tb"
    BT = "bt"
    LR = "lr"
    RL = "rl"

    @property
    def is_horizontal(self) -> bool:
        return self in (RankDir.LR, RankDir.RL)

    @property
    def is_reversed(self) -> bool:
        return self in (RankDir.BT, RankDir.RL)


class Align(_Choice):
    """Pins coordinate assignment to a single alignment instead of balancing all four."""

    UL = "ul"
    UR = "ur"
    DL = "dl"
    DR = "dr"


class Ranker(_Choice):
    NETWORK_SIMPLEX = "network-simplex"
    TIGHT_TREE = "tight-tree"
    LONGEST_PATH = "longest-path"


class Acyclicer(_Choice):
    DFS = "dfs"
    GREEDY = "greedy"


def canonicalize(attrs: Mapping[Any, Any] | None) -> dict[Any, Any]:
    """Copy ``attrs`` with every string key lower-cased."""
    if not attrs:
        return {}
    return {k.lower() if isinstance(k, str) else k: v for k, v in attrs.items()}


def _option_key(key: Any) -> Any:
    return key.lower().replace("_", "") if isinstance(key, str) else key


def _number(options: Mapping[Any, Any], key: str, default: float) -> float:
    if key not in options or options[key] is None:
        return default
    value = options[key]
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric %s '%s', using %s", key, value, default)
        return default
    if number < 0 and key != "marginx" and key != "marginy":
        logger.warning("Negative %s '%s', using %s", key, value, default)
        return default
    return int(number) if number.is_integer() else number


def _constraints(value: Any) -> list[tuple[Hashable, Hashable]]:
    if not value:
        return []
    pairs: list[tuple[Hashable, Hashable]] = []
    for item in value:
        if isinstance(item, Mapping):
            pairs.append((item["left"], item["right"]))
        else:
            left, right = item
            pairs.append((left, right))
    return pairs


@dataclass
class LayoutConfig:
    """Resolved graph-level options for one layout call."""

    rankdir: RankDir = RankDir.TB
    align: Align | None = None
    nodesep: float = 50
    edgesep: float = 10
    ranksep: float = 50
    marginx: float = 0
    marginy: float = 0
    acyclicer: Acyclicer = Acyclicer.DFS
    ranker: Ranker = Ranker.NETWORK_SIMPLEX
    # Call options that are not part of the graph record.
    debug_timing: bool = False
    disable_optimal_order_heuristic: bool = False
    constraints: list[tuple[Hashable, Hashable]] = field(default_factory=list)

    @classmethod
    def from_attrs(
        cls,
        attrs: Mapping[Any, Any] | None = None,
        options: Mapping[Any, Any] | None = None,
    ) -> LayoutConfig:
        """Build a config from a graph record, with ``options`` taking precedence."""
        merged: dict[Any, Any] = {_option_key(k): v for k, v in (attrs or {}).items()}
        merged.update({_option_key(k): v for k, v in (options or {}).items()})

        return cls(
            rankdir=RankDir.parse(merged.get("rankdir"), RankDir.TB),
            align=Align.parse(merged.get("align"), None),
            nodesep=_number(merged, "nodesep", 50),
            edgesep=_number(merged, "edgesep", 10),
            ranksep=_number(merged, "ranksep", 50),
            marginx=_number(merged, "marginx", 0),
            marginy=_number(merged, "marginy", 0),
            acyclicer=Acyclicer.parse(merged.get("acyclicer"), Acyclicer.DFS),
            ranker=Ranker.parse(merged.get("ranker"), Ranker.NETWORK_SIMPLEX),
            debug_timing=bool(merged.get("debugtiming", False)),
            disable_optimal_order_heuristic=bool(merged.get("disableoptimalorderheuristic", False)),
            constraints=_constraints(merged.get("constraints")),
        )

    def graph_record(self) -> dict[str, Any]:
        """The record stored on the internal layout graph."""
        return {
            "rankdir": self.rankdir,
            "align": self.align,
            "nodesep": self.nodesep,
            "edgesep": self.edgesep,
            "ranksep": self.ranksep,
            "marginx": self.marginx,
            "marginy": self.marginy,
            "acyclicer": self.acyclicer,
            "ranker": self.ranker,
        }
