"""Per-agent run statistics."""

from dataclasses import dataclass
from typing import Dict, Iterable

from ..common.schemas import AgentRun


@dataclass
class AgentStats:
    count: int = 0
    found: int = 0
    errors: int = 0
    avg_latency_ms: int = 0

    @property
    def found_rate(self) -> float:
        return self.found / self.count if self.count else 0.0


def latency_score(latency_ms: float) -> float:
    """100 at 0 ms, dropping 1 point per 10 ms, floored at 0"""
    return max(0.0, 100 - latency_ms / 10)


def summarize_runs(runs: Iterable[AgentRun]) -> Dict[str, AgentStats]:
    """Count, found, errors and mean latency per agent"""
    totals: Dict[str, int] = {}
    stats: Dict[str, AgentStats] = {}

    for run in runs:
        entry = stats.setdefault(run.agent, AgentStats())
        entry.count += 1
        if run.error:
            entry.errors += 1
        if run.agent_answer is not None and run.agent_answer.found:
            entry.found += 1
        totals[run.agent] = totals.get(run.agent, 0) + run.latency_ms

    for agent, entry in stats.items():
        entry.avg_latency_ms = round(totals[agent] / entry.count)
    return stats
