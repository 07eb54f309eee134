"""Output helpers for converted files.

Naming (``.eml`` becomes ``.md``), a single merged document, a ZIP
archive, or one Markdown file per message in a directory.
"""

from __future__ import annotations

import logging
import re
import zipfile
from pathlib import Path
from typing import Iterable

from emlkit.models import ConvertedFile

logger = logging.getLogger("emlkit")

_EML_SUFFIX_RE = re.compile(r"\.eml$", re.IGNORECASE)


def markdown_filename(name: str) -> str:
    """Replace a trailing ``.eml`` (any case) with ``.md``."""
    return _EML_SUFFIX_RE.sub(".md", name)


def _utf8(text: str) -> bytes:
    # Lone surrogates from undecodable input bytes cannot be encoded.
    return text.encode("utf-8", "replace")


def merge_documents(files: Iterable[ConvertedFile]) -> str:
    """Concatenate documents, each under a ``# <original name>`` header."""
    return "".join(
        f"# {item.original_name}\n\n{item.content}\n\n---\n\n" for item in files
    )


def write_merged(files: Iterable[ConvertedFile], dest: str | Path) -> Path:
    path = Path(dest)
    path.write_bytes(_utf8(merge_documents(files)))
    logger.info("emlkit | merged | dest=%s", path)
    return path


def write_archive(files: Iterable[ConvertedFile], dest: str | Path) -> Path:
    """Write a ZIP archive holding one ``<name>`` entry per document."""
    path = Path(dest)
    count = 0
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for item in files:
            archive.writestr(item.name, _utf8(item.content))
            count += 1
    logger.info("emlkit | archive | dest=%s | files=%d", path, count)
    return path


def write_markdown_files(files: Iterable[ConvertedFile], out_dir: str | Path) -> list[Path]:
    """Write each document to ``out_dir/<name>`` and return the paths."""
    directory = Path(out_dir)
    directory.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for item in files:
        path = directory / item.name
        path.write_bytes(_utf8(item.content))
        written.append(path)
    return written
