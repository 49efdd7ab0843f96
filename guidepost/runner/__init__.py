"""
Runner - Agent Evaluation Runs

Key Components:
- parse_agent_answer: tolerant JSON answer parsing and identity matching
- build_prompt: prompt templates around simulated web results
- RunOrchestrator: search → prompt → adapter → parse → record
- RunLog: append-only run record
- generate_queries / get_provider_slice: query construction
- summarize_runs: per-agent statistics
"""

from .answer_parser import ParsedAnswer, normalize_name, parse_agent_answer
from .prompts import build_prompt, format_search_results
from .run_log import RunLog
from .orchestrator import BatchResult, RunOrchestrator
from .query_generator import generate_queries, get_provider_slice, format_provider_for_prompt
from .stats import AgentStats, latency_score, summarize_runs

__all__ = [
    "ParsedAnswer",
    "normalize_name",
    "parse_agent_answer",
    "build_prompt",
    "format_search_results",
    "RunLog",
    "BatchResult",
    "RunOrchestrator",
    "generate_queries",
    "get_provider_slice",
    "format_provider_for_prompt",
    "AgentStats",
    "latency_score",
    "summarize_runs",
]
