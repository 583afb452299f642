import io
from typing import Any, Iterator

import pandas as pd
from loguru import logger

from lims.environment import environment
from lims.modules.master_test.const import map_header
from lims.modules.master_test.errors import ParseError


def _clean_row(row: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value.strip() if isinstance(value, str) else value
        for key, value in row.items()
    }


def iter_csv_rows(
    buffer: bytes, chunk_size: int | None = None
) -> Iterator[dict[str, Any]]:
    """
    Stream the rows of an uploaded CSV out of an in-memory buffer.

    Headers go through `map_header`, every cell is read as text (empty cells
    stay "") and string values are trimmed. The generator is single pass;
    a malformed stream raises ParseError from whichever chunk hits it.
    """
    try:
        text = buffer.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Failed to parse CSV file: {exc}") from exc

    if not text.strip():
        logger.warning("CSV buffer is empty, no rows to parse")
        return

    chunk_size = chunk_size or environment.master_test_csv_chunk_size
    total = 0
    try:
        for chunk in pd.read_csv(
            io.StringIO(text),
            chunksize=chunk_size,
            dtype=str,
            keep_default_na=False,
        ):
            chunk = chunk.rename(columns=lambda header: map_header(str(header)))
            for row in chunk.to_dict(orient="records"):
                total += 1
                yield _clean_row(row)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.error(f"CSV parsing stopped after {total} rows: {exc}")
        raise ParseError(f"Failed to parse CSV file: {exc}") from exc

    logger.info(f"Parsed {total} CSV rows")
