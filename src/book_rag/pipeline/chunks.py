"""Loading of source chunks that seed benchmark generation.

Chunks are read from a ``.json`` file holding an array of objects or a
``.jsonl`` file with one object per line. Each object needs ``text`` and
``source_id`` keys; chunks with blank text are dropped.
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from book_rag.core.exceptions import ConfigurationError
from book_rag.evals.schemas import SourceChunk


def _read_records(path: Path) -> list[Any]:
    with open(path, encoding="utf-8") as f:
        if path.suffix == ".jsonl":
            return [json.loads(line) for line in f if line.strip()]
        records = json.load(f)
    if not isinstance(records, list):
        raise ConfigurationError(f"Expected a JSON array of chunks in {path}")
    return records


def load_chunks(path: Path) -> list[SourceChunk]:
    """Load and normalize source chunks from ``path``.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ConfigurationError: if the file is not valid UTF-8 JSON or a record lacks
            the required keys.
    """
    if not path.exists():
        raise FileNotFoundError(f"Chunk file not found: {path}")

    try:
        records = _read_records(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc

    chunks: list[SourceChunk] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict) or "text" not in record or "source_id" not in record:
            raise ConfigurationError(
                f"Chunk {index} in {path} needs 'text' and 'source_id' keys"
            )
        text = str(record["text"]).strip()
        if not text:
            continue
        chunks.append(SourceChunk(text=text, source_id=str(record["source_id"])))

    logger.info("Loaded {} chunks from {}", len(chunks), path)
    return chunks
