"""
CFO Score and Opportunity Matrix Models
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Quadrant(Enum):
    """Portfolio quadrant from risk-adjusted ROI and implementation effort"""
    QUICK_WIN = "Quick Win"
    STRATEGIC_BET = "Strategic Bet"
    NICE_TO_HAVE = "Nice to Have"
    DEPRIORITIZE = "Deprioritize"


@dataclass
class CFOScoreInput:
    """
    Inputs of the CFO score for one process.

    ``discount_rate`` and ``risk_premium_factor`` are decimals (0.10 = 10%).
    ``estimated_time`` is in weeks, ``time_target`` in months.
    """
    initial_cost: float
    savings_years: List[float]
    discount_rate: float = 0.10
    complexity_index: float = 0.0
    budget: float = 0.0
    eac: float = 0.0
    emv: float = 0.0
    risk_premium_factor: float = 0.03
    estimated_cost: Optional[float] = None  # defaults to initial_cost
    estimated_time: float = 1.0
    cost_target: float = 100000.0
    time_target: float = 6.0
    global_risk_factor: Optional[float] = None
    start_year: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CFOScoreInput":
        return cls(
            initial_cost=data.get("initial_cost", 0.0),
            savings_years=list(data.get("savings_years", [])),
            discount_rate=data.get("discount_rate", 0.10),
            complexity_index=data.get("complexity_index", 0.0),
            budget=data.get("budget", 0.0),
            eac=data.get("eac", 0.0),
            emv=data.get("emv", 0.0),
            risk_premium_factor=data.get("risk_premium_factor", 0.03),
            estimated_cost=data.get("estimated_cost"),
            estimated_time=data.get("estimated_time", 1.0),
            cost_target=data.get("cost_target", 100000.0),
            time_target=data.get("time_target", 6.0),
            global_risk_factor=data.get("global_risk_factor"),
            start_year=data.get("start_year", 1),
        )


@dataclass
class CFOScoreResult:
    roi_a: float  # risk-adjusted ROI, decimal
    implementation_effort: float  # 0-1
    execution_health: float  # 0-1
    risk_factor: float  # 0-1
    npv_final: float
    r_adj: float
    quadrant: Quadrant
    effective_risk: float
    roi_risk_weighted: float
    cfo_score_raw: float
    cfo_score_norm: float  # 0-10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roiA": round(self.roi_a, 4),
            "implementationEffort": round(self.implementation_effort, 4),
            "executionHealth": round(self.execution_health, 4),
            "riskFactor": round(self.risk_factor, 4),
            "npvFinal": round(self.npv_final, 2),
            "rAdj": round(self.r_adj, 4),
            "quadrant": self.quadrant.value,
            "effectiveRisk": round(self.effective_risk, 2),
            "roiRiskWeighted": round(self.roi_risk_weighted, 4),
            "cfoScoreRaw": round(self.cfo_score_raw, 4),
            "cfoScoreNorm": round(self.cfo_score_norm, 2),
        }


@dataclass
class MatrixProcess:
    """One bubble of the opportunity matrix"""
    process_id: str
    process_name: str
    group: str
    engine: Optional[str]
    roi: float  # roi_a
    implementation_effort: float
    execution_health: float
    risk_factor: float
    npv: float
    r_adj: float
    complexity_index: float  # effective risk
    implementation_weeks: float
    initial_cost: float
    budget: float
    eac: float
    emv: float
    quadrant: Quadrant
    cfo_score_norm: float = 0.0
    bubble_size: float = 16.0
    is_starting_process: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processId": self.process_id,
            "processName": self.process_name,
            "group": self.group,
            "engine": self.engine,
            "roi": round(self.roi, 4),
            "implementationEffort": round(self.implementation_effort, 4),
            "executionHealth": round(self.execution_health, 4),
            "riskFactor": round(self.risk_factor, 4),
            "npv": round(self.npv, 2),
            "rAdj": round(self.r_adj, 4),
            "complexityIndex": round(self.complexity_index, 2),
            "implementationWeeks": self.implementation_weeks,
            "initialCost": round(self.initial_cost, 2),
            "budget": round(self.budget, 2),
            "eac": round(self.eac, 2),
            "emv": round(self.emv, 2),
            "quadrant": self.quadrant.value,
            "cfoScoreNorm": round(self.cfo_score_norm, 2),
            "bubbleSize": round(self.bubble_size, 2),
            "isStartingProcess": self.is_starting_process,
        }


@dataclass
class OpportunityMatrix:
    processes: List[MatrixProcess] = field(default_factory=list)

    @property
    def starting_process(self) -> Optional[MatrixProcess]:
        for process in self.processes:
            if process.is_starting_process:
                return process
        return None

    def by_quadrant(self) -> Dict[str, List[MatrixProcess]]:
        grouped: Dict[str, List[MatrixProcess]] = {q.value: [] for q in Quadrant}
        for process in self.processes:
            grouped[process.quadrant.value].append(process)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        starting = self.starting_process
        return {
            "processes": [p.to_dict() for p in self.processes],
            "startingProcessId": starting.process_id if starting else None,
            "quadrantCounts": {name: len(items) for name, items in self.by_quadrant().items()},
        }
