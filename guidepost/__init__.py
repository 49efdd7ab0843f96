"""
Guidepost Harness

Compares how hosted LLM agents (OpenAI, xAI, Gemini) answer healthcare
provider lookup queries against a synthetic directory.

Pipeline:
- Simulated web search ranks a fixed provider corpus for each query
- A prompt embeds the ranked results
- Each agent answers through its REST adapter
- The answer is parsed against a strict schema and recorded as a run

Usage:
    from guidepost.common import load_config
    from guidepost.search import SearchInput, search
    from guidepost.adapters import get_adapter
    from guidepost.runner import RunOrchestrator, parse_agent_answer
"""

__version__ = "0.1.0"
