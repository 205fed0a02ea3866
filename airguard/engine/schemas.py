from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Sequence, Union

TrendLabel = Literal["rising", "falling", "stable", "volatile"]
EvalStatus = Literal["Excellent", "Good", "Okay", "Weak"]

# A raw sample is a {ts,value} / {timestamp,value} / {x,y} mapping or a [time, value] pair.
RawSample = Union[Mapping[str, Any], Sequence[Any]]
RawSeries = Mapping[str, Any]


@dataclass(frozen=True)
class PreparedPoint:
    ts: float  # epoch milliseconds
    value: float


@dataclass(frozen=True)
class SensorEvaluation:
    value: float
    score: float
    trend: TrendLabel
    slope_per_min: float
    r2: float
    advice: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "score": self.score,
            "trend": self.trend,
            "slopePerMin": self.slope_per_min,
            "r2": self.r2,
            "advice": list(self.advice),
        }


@dataclass(frozen=True)
class EvalResponse:
    overall: float
    status: EvalStatus
    highlights: List[str]
    sensors: Dict[str, SensorEvaluation]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form served to the dashboard as-is."""
        return {
            "overall": self.overall,
            "status": self.status,
            "highlights": list(self.highlights),
            "sensors": {key: ev.to_dict() for key, ev in self.sensors.items()},
        }
