import json
import logging
import os
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def parse_document(path: str) -> Optional[Any]:
    """Load a YAML or JSON spec file, or return None if it does not parse.

    ``.json`` files go through a strict JSON parser; everything else is read
    as YAML, which also accepts JSON-style mappings. I/O errors are not
    caught here.
    """
    raw = _read(path)
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == ".json":
            return json.loads(raw, parse_constant=_reject_constant)
        return yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError) as e:
        logger.error("Error parsing %s file: %s\n%s", ext or "yaml", path, e)
        return None
