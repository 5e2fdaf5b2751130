"""
Local docs reading tool.

Only file names on an allow-list are readable, which rules out path
traversal. Problems are reported in the result payload rather than raised
so the model can recover by picking another file.
"""

import logging
from pathlib import Path
from typing import Sequence

from .parameters import ParametersBuilder
from .registry import ToolDefinition

logger = logging.getLogger(__name__)

MAX_BYTES = 16 * 1024


def read_docs_file(
    args,
    docs_dir: Path,
    allowed: Sequence[str],
    max_bytes: int = MAX_BYTES,
) -> dict:
    """
    Read an allow-listed markdown file.

    Returns:
        ``{"filename", "content"}`` plus ``truncated``/``max_bytes`` when the
        file was cut, or ``{"error": ...}``.
    """
    filename = args.get("filename") if isinstance(args, dict) else None
    if not isinstance(filename, str):
        return {"error": "filename is required"}
    if filename not in allowed:
        return {"error": f"filename not allowed: {filename}"}
    if "/" in filename or "\\" in filename:
        return {"error": "invalid filename"}

    path = Path(docs_dir) / filename
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.debug("Failed to read %s: %s", path, e)
        return {"error": f"read error: {e}"}

    if len(data) > max_bytes:
        content = data[:max_bytes].decode("utf-8", errors="ignore")
        return {
            "filename": filename,
            "content": content,
            "truncated": True,
            "max_bytes": max_bytes,
        }
    return {"filename": filename, "content": data.decode("utf-8", errors="replace")}


def build_read_docs_tool(
    docs_dir: str | Path,
    allowed: Sequence[str],
    max_bytes: int = MAX_BYTES,
) -> ToolDefinition:
    """Build the ``read_docs_file`` tool bound to ``docs_dir``."""
    allowed = tuple(allowed)
    params = (
        ParametersBuilder.new_object()
        .add_string_enum(
            "filename",
            f"Target docs file name (one of {', '.join(allowed)})",
            allowed,
        )
        .required("filename")
        .additional_properties(False)
        .build()
    )
    directory = Path(docs_dir)
    return ToolDefinition(
        name="read_docs_file",
        description=(
            "Read a markdown file from the local docs directory and return "
            "its text content."
        ),
        parameters=params,
        handler=lambda args: read_docs_file(args, directory, allowed, max_bytes),
    )
