"""
Run Orchestrator

For each (query, agent) pair: search → prompt → adapter call → parse → record.

Pipeline per pair, terminal in one pass:
1. Credential check; a missing key is recorded without any network call
2. Prompt built from the query and its ranked search results
3. Adapter call; any failure is recorded with agent_answer=None
4. Output parsed; a parse failure keeps the sentinel answer and sets error

Queries run in order, agents in order within each query, so at most one
outbound call is in flight. No single failure stops the loop.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from ..adapters import get_adapter, has_api_key
from ..adapters.errors import AdapterError
from ..common.config import HarnessConfig, load_config
from ..common.schemas import (
    AgentRun,
    AgentSpec,
    DirectoryProvider,
    GeneratedQuery,
    RequestContext,
    generate_run_id,
)
from ..search.corpus import CorpusStore, get_corpus_store
from ..search.engine import SearchInput, SearchResult, search
from .answer_parser import parse_agent_answer
from .prompts import build_prompt
from .run_log import RunLog

logger = logging.getLogger("guidepost.runner.orchestrator")


@dataclass
class BatchResult:
    """Runs in execution order plus the search results used per query"""
    runs: List[AgentRun] = field(default_factory=list)
    search_results: Dict[str, List[SearchResult]] = field(default_factory=dict)

    def search_results_json(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            query_id: [r.to_dict() for r in results]
            for query_id, results in self.search_results.items()
        }


class RunOrchestrator:
    """
    Runs agents against queries and records one AgentRun per pair.

    Usage:
        orchestrator = RunOrchestrator(config=load_config())
        result = await orchestrator.run_batch(queries, agents)
    """

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        store: Optional[CorpusStore] = None,
        run_log: Optional[RunLog] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize orchestrator.

        Args:
            config: Harness configuration (loaded from env/file if omitted)
            store: Provider data; the process-wide store if omitted
            run_log: Log every recorded run is appended to
            client: Shared httpx client handed to the adapters
            clock: Monotonic seconds source for latency measurement
        """
        self.config = config or load_config()
        self.store = store or get_corpus_store(self.config.data)
        self.run_log = run_log if run_log is not None else RunLog(self.config.data.runs_path or None)
        self._client = client
        self._clock = clock

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def expected_provider_name(self, provider_id: Optional[str]) -> Optional[str]:
        provider = self.store.find_directory_provider(provider_id)
        return provider.full_name if provider else None

    def search(self, search_input: SearchInput) -> List[SearchResult]:
        return search(search_input, self.store.web_providers, self.config.search.limit)

    # ------------------------------------------------------------------
    # Single pair
    # ------------------------------------------------------------------

    def _record(
        self,
        query_id: str,
        agent_spec: AgentSpec,
        started: float,
        search_results: Sequence[SearchResult],
        output_text: str = "",
        raw: Any = None,
        error: Optional[str] = None,
        request_context: Optional[RequestContext] = None,
        expected_name: Optional[str] = None,
    ) -> AgentRun:
        agent_answer = None
        if error is None:
            parsed = parse_agent_answer(output_text, expected_name, self.store.directory)
            agent_answer = parsed.answer
            error = parsed.parse_error

        run = AgentRun(
            run_id=generate_run_id(),
            query_id=query_id,
            agent=agent_spec.agent,
            model=agent_spec.model,
            latency_ms=int(round((self._clock() - started) * 1000)),
            output_text=output_text,
            agent_answer=agent_answer,
            error=error,
            raw_response=raw,
            request_context=request_context,
            search_results=[r.to_dict() for r in search_results],
        )
        self.run_log.append(run)
        return run

    async def run_agent(
        self,
        query_id: str,
        query_text: str,
        provider_id: Optional[str],
        agent_spec: AgentSpec,
        search_results: Sequence[SearchResult],
    ) -> AgentRun:
        """Run one agent against one query and record the outcome"""
        agent = agent_spec.agent
        expected_name = self.expected_provider_name(provider_id)
        started = self._clock()

        if not has_api_key(agent, self.config.agents):
            logger.info("[%s] API key not configured, skipping query %s", agent, query_id)
            return self._record(
                query_id, agent_spec, started, search_results,
                error=f"API key not configured for {agent}",
                expected_name=expected_name,
            )

        prompt = build_prompt(query_text, expected_name, search_results)
        logger.info(
            "[%s] Query %s: %s (%d search results, model %s, expected %s)",
            agent, query_id, query_text, len(search_results),
            agent_spec.model, expected_name or "null",
        )
        logger.debug("[%s] Prompt: %s", agent, prompt)

        try:
            adapter = get_adapter(agent, self.config.agents, self._client)
            response = await adapter.invoke(prompt=prompt, model=agent_spec.model)
        except AdapterError as e:
            logger.warning("[%s] Query %s failed: %s", agent, query_id, e)
            return self._record(
                query_id, agent_spec, started, search_results,
                error=str(e), expected_name=expected_name,
            )
        except Exception as e:
            logger.error("[%s] Query %s failed unexpectedly: %s", agent, query_id, e, exc_info=True)
            return self._record(
                query_id, agent_spec, started, search_results,
                error=str(e) or "Unknown error", expected_name=expected_name,
            )

        logger.debug("[%s] Raw response: %s", agent, response.raw)
        return self._record(
            query_id, agent_spec, started, search_results,
            output_text=response.output_text,
            raw=response.raw,
            request_context=RequestContext(query_text=query_text, candidate_provider_ids=[]),
            expected_name=expected_name,
        )

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def _run_agents(
        self,
        query_id: str,
        query_text: str,
        provider_id: Optional[str],
        agents: Sequence[AgentSpec],
        search_results: List[SearchResult],
        result: BatchResult,
    ) -> None:
        result.search_results[query_id] = search_results
        for agent_spec in agents:
            run = await self.run_agent(query_id, query_text, provider_id, agent_spec, search_results)
            result.runs.append(run)

    async def run_request(
        self,
        query_id: str,
        query_text: str,
        agents: Sequence[AgentSpec],
        target: Optional[DirectoryProvider] = None,
    ) -> BatchResult:
        """
        Single free-text query.

        Structured search criteria come from the target provider's first
        specialty, location, insurance and language.
        """
        result = BatchResult()
        search_results = self.search(SearchInput.from_directory_provider(query_text, target))
        provider_id = target.provider_id if target else None
        await self._run_agents(query_id, query_text, provider_id, agents, search_results, result)
        return result

    async def run_query(self, query: GeneratedQuery, agents: Sequence[AgentSpec]) -> BatchResult:
        """One generated query against every agent"""
        result = BatchResult()
        search_results = self.search(SearchInput.from_query(query))
        await self._run_agents(
            query.query_id, query.query_text, query.provider_id, agents, search_results, result,
        )
        return result

    async def run_batch(
        self,
        queries: Sequence[GeneratedQuery],
        agents: Sequence[AgentSpec],
    ) -> BatchResult:
        """Every query against every agent, queries outermost"""
        result = BatchResult()
        for query in queries:
            search_results = self.search(SearchInput.from_query(query))
            await self._run_agents(
                query.query_id, query.query_text, query.provider_id, agents, search_results, result,
            )
        logger.info("Batch complete: %d queries, %d runs", len(queries), len(result.runs))
        return result
