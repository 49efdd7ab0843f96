#!/usr/bin/env python3
"""
Batch Run Script

Runs agents against generated queries without the HTTP service and prints
per-agent statistics. Queries come from a JSONL file, or are generated from
the provider directory with a query template config.

Usage:
    python scripts/run_batch.py --queries data/queries.jsonl --agent openai:gpt-4.1-mini
    python scripts/run_batch.py --template data/config.json --count 20 --seed 7 \
        --agent xai:grok-2 --agent gemini:gemini-1.5-pro --runs-out data/runs.jsonl
"""

import sys
import asyncio
import argparse
import random
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def parse_agent(value: str):
    from guidepost.common.schemas import AgentSpec

    agent, _, model = value.partition(":")
    return AgentSpec(agent=agent, model=model)


def main():
    parser = argparse.ArgumentParser(description="Run agents against provider lookup queries")
    parser.add_argument("--queries", type=str, help="JSONL file of generated queries")
    parser.add_argument("--template", type=str, help="Query template config (JSON) to generate queries")
    parser.add_argument("--count", type=int, default=10, help="Number of queries to generate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for query generation")
    parser.add_argument("--agent", action="append", default=[], help="agent:model, repeatable")
    parser.add_argument("--runs-out", type=str, default="", help="Append runs to this JSONL file")
    args = parser.parse_args()

    from dotenv import load_dotenv
    from guidepost.common.config import load_config
    from guidepost.common.jsonl import read_jsonl
    from guidepost.common.schemas import GeneratedQuery
    from guidepost.runner import RunLog, RunOrchestrator, generate_queries, summarize_runs
    from guidepost.runner.query_generator import load_template_config
    from guidepost.search import get_corpus_store

    load_dotenv()
    config = load_config()
    store = get_corpus_store(config.data)

    agents = [parse_agent(a) for a in args.agent]
    if not agents:
        agents = [
            parse_agent(f"{kind}:{config.agents.for_kind(kind).model}")
            for kind in ("openai", "xai", "gemini")
        ]

    if args.queries:
        queries = [GeneratedQuery.model_validate(q) for q in read_jsonl(args.queries)]
    elif args.template:
        template = load_template_config(args.template)
        queries = generate_queries(template, store.directory, args.count, random.Random(args.seed))
    else:
        print("[Batch] ERROR: pass --queries or --template")
        sys.exit(1)

    print(f"[Batch] {len(queries)} queries x {len(agents)} agents")

    orchestrator = RunOrchestrator(
        config=config,
        store=store,
        run_log=RunLog(args.runs_out or config.data.runs_path or None),
    )
    result = asyncio.run(orchestrator.run_batch(queries, agents))

    for agent, stats in summarize_runs(result.runs).items():
        print(
            f"[Batch] {agent}: {stats.count} runs, {stats.found} found, "
            f"{stats.errors} errors, avg {stats.avg_latency_ms} ms"
        )


if __name__ == "__main__":
    main()
