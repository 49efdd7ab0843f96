"""
Run Log

Append-only record of agent runs, optionally mirrored to a JSONL file
(one run per line).
"""

import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from ..common.jsonl import append_jsonl, read_jsonl
from ..common.schemas import AgentRun

logger = logging.getLogger("guidepost.runner.run_log")


class RunLog:
    """
    Thread-safe, append-only list of AgentRun records.

    Runs are never modified or removed once appended. When a path is given,
    each append is also written to the JSONL file; a failed write is logged
    and the run is still kept in memory. With keep_in_memory=False the log
    only writes to the file, for long-lived processes that never read runs
    back.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, keep_in_memory: bool = True):
        self._path = Path(path) if path else None
        self._keep_in_memory = keep_in_memory
        self._runs: List[AgentRun] = []
        self._lock = threading.Lock()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def keep_in_memory(self) -> bool:
        return self._keep_in_memory

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)

    def append(self, run: AgentRun) -> None:
        with self._lock:
            if self._keep_in_memory:
                self._runs.append(run)
            if self._path is not None:
                try:
                    append_jsonl(self._path, run.model_dump(mode="json"))
                except OSError as e:
                    logger.warning("Failed to write run %s to %s: %s", run.run_id, self._path, e)

    def extend(self, runs: Iterable[AgentRun]) -> None:
        for run in runs:
            self.append(run)

    def runs(self) -> List[AgentRun]:
        """Snapshot of the in-memory log"""
        with self._lock:
            return list(self._runs)

    def load(self) -> int:
        """
        Read previously persisted runs into memory.

        Returns:
            Number of runs loaded (invalid lines are skipped; 0 when the log
            does not keep runs in memory)
        """
        if not self._keep_in_memory or self._path is None or not self._path.exists():
            return 0

        try:
            raw_records = read_jsonl(self._path)
        except OSError as e:
            logger.warning("Failed to read run log %s: %s", self._path, e)
            return 0

        loaded = []
        for raw in raw_records:
            try:
                loaded.append(AgentRun.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping invalid run record: %s", e.errors()[:1])

        with self._lock:
            self._runs.extend(loaded)
        return len(loaded)
