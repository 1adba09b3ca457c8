import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from bcli.compress.terms import TermCompressor
from bcli.extract.summary import DomainSummary, extract_summary

logger = logging.getLogger(__name__)

SPEC_SUFFIXES = (".yaml", ".yml", ".json")


def list_spec_files(path: str) -> List[str]:
    names = sorted(os.listdir(path))
    return [
        os.path.join(path, n)
        for n in names
        if n.endswith(SPEC_SUFFIXES) and os.path.isfile(os.path.join(path, n))
    ]


def summarize_directory(
    path: str,
    compress: bool = True,
    workers: int = 1,
    compressor: Optional[TermCompressor] = None,
) -> List[DomainSummary]:
    """Summarize every .yaml/.yml/.json file directly inside ``path``.

    Results follow the sorted file name order. An unreadable directory or
    file raises ``OSError``; a file that fails to parse becomes an
    "Invalid YAML/JSON" summary instead.
    """
    files = list_spec_files(path)
    if not files:
        logger.warning("No files with .yaml, .yml or .json found in %s", path)
        return []

    def run(file_path: str) -> DomainSummary:
        return extract_summary(file_path, compress, compressor)

    if workers <= 1 or len(files) == 1:
        return [run(f) for f in files]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # map() yields in submission order
        return list(pool.map(run, files))
