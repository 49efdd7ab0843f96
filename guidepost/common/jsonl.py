"""
JSON Lines helpers

One JSON object per line. Unparseable lines, including lines that are not
valid UTF-8, are skipped with a warning so a single bad record never fails a
whole load.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

logger = logging.getLogger("guidepost.common.jsonl")


def parse_jsonl(data: Union[str, bytes]) -> List[Any]:
    """Parse JSONL text or raw bytes, skipping blank and unparseable lines"""
    results = []
    for line_no, line in enumerate(data.splitlines(), start=1):
        try:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            if not line.strip():
                continue
            results.append(json.loads(line))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Skipping unparseable JSONL line %d: %s", line_no, e)
    return results


def to_jsonl(records: Iterable[Dict[str, Any]]) -> str:
    """Serialize records to JSONL text"""
    return "\n".join(json.dumps(record) for record in records)


def read_jsonl(path: Union[str, Path]) -> List[Any]:
    """Read a JSONL file; lines are decoded one at a time"""
    with open(path, "rb") as f:
        return parse_jsonl(f.read())


def append_jsonl(path: Union[str, Path], record: Dict[str, Any]) -> None:
    """Append one record to a JSONL file, creating it if needed"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record) + "\n")
