"""
Guidepost Server

FastAPI service that runs agents against healthcare provider queries.

Endpoints:
- POST /api/run: one query against a list of agents
- POST /api/run-batch: many generated queries against a list of agents
- GET /health: Health check

Both run endpoints return a list of AgentRun, or {runs, searchResults}
when the request sets "debug": true.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .common.config import load_config
from .common.schemas import AgentSpec, DirectoryProvider, GeneratedQuery
from .runner.orchestrator import BatchResult, RunOrchestrator
from .runner.run_log import RunLog
from .search.corpus import get_corpus_store

logger = logging.getLogger("guidepost.server")

LOCAL_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


# Global state
orchestrator: Optional[RunOrchestrator] = None
http_client: Optional[httpx.AsyncClient] = None


def get_orchestrator() -> RunOrchestrator:
    """Return the orchestrator, creating it on first use"""
    global orchestrator

    if orchestrator is None:
        config = load_config()
        store = get_corpus_store(config.data)
        # Runs go to the JSONL file only; the service never reads them back
        run_log = RunLog(config.data.runs_path or None, keep_in_memory=False)
        orchestrator = RunOrchestrator(
            config=config,
            store=store,
            run_log=run_log,
            client=http_client,
        )
    return orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load provider data and open the shared HTTP client on startup"""
    global http_client, orchestrator

    logger.info("Starting up...")
    http_client = httpx.AsyncClient()

    created = orchestrator is None
    runner = get_orchestrator()
    logger.info(
        "Loaded %d directory providers, %d web providers",
        len(runner.store.directory),
        len(runner.store.web_providers),
    )
    if runner.run_log.path:
        logger.info("Appending runs to %s", runner.run_log.path)

    yield

    logger.info("Shutting down...")
    await http_client.aclose()
    http_client = None
    if created:
        orchestrator = None


app = FastAPI(
    title="Guidepost Harness",
    description="Compare LLM agents on healthcare provider lookups",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=LOCAL_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request Models
# =============================================================================

class RunRequest(BaseModel):
    """Single query request"""
    query_id: str = Field(..., min_length=1)
    query_text: str = Field(..., min_length=1)
    agents: List[AgentSpec]
    providers: Optional[List[DirectoryProvider]] = None
    debug: bool = False


class RunBatchRequest(BaseModel):
    """Batch request"""
    queries: List[GeneratedQuery]
    agents: List[AgentSpec]
    debug: bool = False


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s body: %s", request.url.path, exc.errors()[:1])
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def _runs_payload(result: BatchResult) -> List[Dict[str, Any]]:
    return [run.model_dump(mode="json") for run in result.runs]


def _internal_error(route: str, error: Exception) -> JSONResponse:
    logger.error("Error in %s: %s", route, error, exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# Endpoints
# =============================================================================

@app.post("/api/run")
async def run_single(body: RunRequest):
    """Run one query against the requested agents"""
    try:
        target = body.providers[0] if body.providers else None
        result = await get_orchestrator().run_request(
            query_id=body.query_id,
            query_text=body.query_text,
            agents=body.agents,
            target=target,
        )
        runs = _runs_payload(result)
        if body.debug:
            return {
                "runs": runs,
                "searchResults": result.search_results_json().get(body.query_id, []),
            }
        return runs
    except Exception as e:
        return _internal_error("/api/run", e)


@app.post("/api/run-batch")
async def run_batch(body: RunBatchRequest):
    """Run every query against every requested agent"""
    try:
        result = await get_orchestrator().run_batch(body.queries, body.agents)
        runs = _runs_payload(result)
        if body.debug:
            return {"runs": runs, "searchResults": result.search_results_json()}
        return runs
    except Exception as e:
        return _internal_error("/api/run-batch", e)


@app.get("/health")
async def health():
    """Health check"""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the Guidepost server"""
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    logger.info("Starting server on port %d", config.server.port)
    uvicorn.run(
        "guidepost.server:app",
        host=config.server.host,
        port=config.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
