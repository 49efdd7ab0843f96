"""
Guidepost Common Module

Shared infrastructure for search, adapters and the run orchestrator.
"""

from .config import HarnessConfig, load_config
from .jsonl import parse_jsonl, read_jsonl, to_jsonl, append_jsonl
from .llm_utils import strip_code_fences, parse_json_from_text

__all__ = [
    "HarnessConfig",
    "load_config",
    "parse_jsonl",
    "read_jsonl",
    "to_jsonl",
    "append_jsonl",
    "strip_code_fences",
    "parse_json_from_text",
]
