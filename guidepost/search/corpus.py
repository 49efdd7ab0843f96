"""
Corpus Store

Loads the provider directory (providers.jsonl) and the simulated web search
corpus (fake_web_providers.jsonl) once per process and serves them read-only.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..common.config import DataConfig
from ..common.jsonl import read_jsonl
from ..common.schemas import DirectoryProvider, ProviderRecord

logger = logging.getLogger("guidepost.search.corpus")

DIRECTORY_FILENAME = "providers.jsonl"
WEB_CORPUS_FILENAME = "fake_web_providers.jsonl"

T = TypeVar("T", bound=BaseModel)


def candidate_data_dirs(data_dir: str = "") -> List[Path]:
    """Directories searched for the data files, in priority order"""
    dirs = []
    if data_dir:
        dirs.append(Path(data_dir))
    cwd = Path.cwd()
    dirs.extend([
        cwd / "public" / "data",
        cwd.parent / "public" / "data",
        cwd / "data",
    ])
    return dirs


def resolve_data_path(filename: str, explicit: str = "", data_dir: str = "") -> Optional[Path]:
    """Explicit path wins; otherwise the first candidate dir holding the file"""
    if explicit:
        return Path(explicit)
    for directory in candidate_data_dirs(data_dir):
        path = directory / filename
        if path.exists():
            return path
    return None


def load_records(path: Optional[Path], model: Type[T]) -> List[T]:
    """
    Load and validate JSONL records.

    Lines that fail to parse or validate are skipped. A missing file yields
    an empty list.
    """
    if path is None or not path.exists():
        logger.error("Could not find %s", path or model.__name__)
        return []

    try:
        raw_records = read_jsonl(path)
    except OSError as e:
        logger.error("Failed to read %s: %s", path, e)
        return []

    records = []
    for raw in raw_records:
        try:
            records.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping invalid %s record: %s", model.__name__, e.errors()[:1])
    logger.info("Loaded %d %s records from %s", len(records), model.__name__, path)
    return records


class CorpusStore:
    """
    Process-wide, read-only provider data.

    Both files are loaded lazily on first access and cached. reset() drops
    the cache so tests can swap data in isolation.
    """

    def __init__(
        self,
        data_config: Optional[DataConfig] = None,
        directory: Optional[Sequence[DirectoryProvider]] = None,
        web_providers: Optional[Sequence[ProviderRecord]] = None,
    ):
        self._data = data_config or DataConfig()
        self._lock = threading.Lock()
        self._directory: Optional[List[DirectoryProvider]] = (
            list(directory) if directory is not None else None
        )
        self._web_providers: Optional[List[ProviderRecord]] = (
            list(web_providers) if web_providers is not None else None
        )

    @property
    def directory(self) -> List[DirectoryProvider]:
        """Directory providers (ground truth for queries)"""
        if self._directory is None:
            with self._lock:
                if self._directory is None:
                    path = resolve_data_path(
                        DIRECTORY_FILENAME,
                        self._data.providers_path,
                        self._data.data_dir,
                    )
                    self._directory = load_records(path, DirectoryProvider)
        return self._directory

    @property
    def web_providers(self) -> List[ProviderRecord]:
        """Search corpus"""
        if self._web_providers is None:
            with self._lock:
                if self._web_providers is None:
                    path = resolve_data_path(
                        WEB_CORPUS_FILENAME,
                        self._data.web_providers_path,
                        self._data.data_dir,
                    )
                    self._web_providers = load_records(path, ProviderRecord)
        return self._web_providers

    def find_directory_provider(self, provider_id: Optional[str]) -> Optional[DirectoryProvider]:
        if not provider_id:
            return None
        for provider in self.directory:
            if provider.provider_id == provider_id:
                return provider
        return None

    def reset(self) -> None:
        """Drop cached data; the next access reloads from disk"""
        with self._lock:
            self._directory = None
            self._web_providers = None


# Module-level singleton
_store_instance: Optional[CorpusStore] = None
_store_lock = threading.Lock()


def get_corpus_store(data_config: Optional[DataConfig] = None) -> CorpusStore:
    """
    Get the singleton CorpusStore.

    data_config is only used when the store is first created.
    """
    global _store_instance

    if _store_instance is None:
        with _store_lock:
            if _store_instance is None:
                _store_instance = CorpusStore(data_config)
    return _store_instance


def reset_corpus_store() -> None:
    """Forget the singleton (test isolation)"""
    global _store_instance

    with _store_lock:
        _store_instance = None
