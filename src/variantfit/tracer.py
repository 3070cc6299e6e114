"""
Plan tracing infrastructure for variantfit.

Planning functions are pure: instead of logging, each decision is reported to
an injected observer. By default that observer discards everything, so tests
and hosts that do not care pay nothing.

This is primarily useful for:
1. Debugging layout decisions (why a target ended up vertical, why a scale
   was capped)
2. Understanding the planning flow (seeing intermediate values per stage)
3. Writing targeted tests (asserting on a specific decision reason)

Usage:
    >>> from variantfit import RetargetEngine
    >>> from variantfit.tracer import PlanTrace
    >>> trace = PlanTrace()
    >>> engine = RetargetEngine(observer=trace)
    >>> plan = engine.plan(source, target)
    >>> print(trace.summary())
    >>> trace.dump_to_file("plan_trace.txt")

Hosts that already collect logs can use LoggingObserver, which forwards every
stage to the module logger at DEBUG level.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class PlanObserver(Protocol):
    """Protocol for objects that receive planning decisions."""

    def record(self, stage: str, data: Dict[str, Any]) -> None:
        """Record one decision or intermediate value set."""
        ...


class NullObserver:
    """Observer that ignores everything."""

    def record(self, stage: str, data: Dict[str, Any]) -> None:
        return None


class LoggingObserver:
    """Observer that forwards stages to a standard library logger."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self._log = log or logger
        self._level = level

    def record(self, stage: str, data: Dict[str, Any]) -> None:
        if self._log.isEnabledFor(self._level):
            self._log.log(self._level, "%s: %s", stage, data)


@dataclass
class PlanStage:
    """
    Snapshot of one planning decision.

    Planning for a target passes through these stages:
    1. profile - Target aspect classification
    2. analysis - Content bounds, density and strategy
    3. scale - Chosen uniform scale
    4. orientation - Resolved flow orientation and the tier that decided it
    5. expansion_horizontal / expansion_vertical - Axis space split
    6. absolute_positions - Freeform child placement
    7. adaptation - Final flow container plan

    Attributes:
        name: Name of this stage
        data: Dictionary of relevant values at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class PlanTrace:
    """
    Complete trace of one or more planning runs.

    Usage:
        >>> trace = PlanTrace()
        >>> engine = RetargetEngine(observer=trace)
        >>> engine.plan(source, target)
        >>>
        >>> # Why was this orientation chosen?
        >>> print(trace.get_stage("orientation").data["reason"])
        >>>
        >>> # All scale decisions when planning many targets
        >>> scales = trace.get_stages("scale")

    Attributes:
        stages: Recorded stages, in order
    """

    stages: List[PlanStage] = field(default_factory=list)

    def record(self, stage: str, data: Dict[str, Any]) -> None:
        """
        Add a planning stage snapshot.

        Args:
            stage: Name of the stage (e.g., "scale")
            data: Dictionary of relevant values at this stage
        """
        self.stages.append(PlanStage(stage, dict(data)))

    def get_stage(self, name: str) -> Optional[PlanStage]:
        """Get the most recent stage with the given name."""
        for stage in reversed(self.stages):
            if stage.name == name:
                return stage
        return None

    def get_stages(self, name: str) -> List[PlanStage]:
        """Get every stage with the given name, in recording order."""
        return [stage for stage in self.stages if stage.name == name]

    def clear(self) -> None:
        self.stages.clear()

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the stage count and how often each stage
        was recorded.
        """
        lines = [
            "=" * 60,
            "PLAN TRACE SUMMARY",
            "=" * 60,
            "",
            f"Recorded stages: {len(self.stages)}",
        ]

        counts: Dict[str, int] = {}
        for stage in self.stages:
            counts[stage.name] = counts.get(stage.name, 0) + 1

        for name, count in counts.items():
            lines.append(f"  {name}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete dump of the trace, including every stage."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
