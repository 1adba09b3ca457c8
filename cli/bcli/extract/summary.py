import logging
import math
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bcli.compress.terms import DEFAULT_COMPRESSOR, TermCompressor, js_trim
from bcli.parse.document import parse_document

logger = logging.getLogger(__name__)

INVALID_DOCUMENT = "Invalid YAML/JSON"
UNKNOWN_TITLE = "Unknown"
DOMAIN_EVENT_MARKER = "Domain Event"
EVENT_SUMMARY_RE = re.compile(r"Created|Updated|Notify", re.IGNORECASE)


@dataclass(frozen=True)
class Entity:
    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class DomainSummary:
    service_domain: str
    entities: Tuple[Entity, ...] = field(default_factory=tuple)
    domain_events: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def invalid(cls) -> "DomainSummary":
        return cls(INVALID_DOCUMENT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serviceDomain": self.service_domain,
            "entities": [e.to_dict() for e in self.entities],
            "domainEvents": list(self.domain_events),
        }


def dig(data: Any, *keys: str, default: Any = None) -> Any:
    """Walk nested mappings, returning ``default`` on any missing step."""
    cur = data
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return default if cur is None else cur


def dig_mapping(data: Any, *keys: str) -> Dict[Any, Any]:
    found = dig(data, *keys, default={})
    return found if isinstance(found, dict) else {}


def js_falsy(value: Any) -> bool:
    """Falsiness as a JS ``!value`` sees it; empty containers are truthy."""
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or math.isnan(value)
    return isinstance(value, str) and value == ""


def _as_text(value: Any) -> str:
    # mirrors JS String() for the scalar and container shapes YAML produces
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def collation_key(name: str) -> Tuple[str, str, str]:
    # primary: base letters without case or accents; then accents; then
    # lowercase before uppercase
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), decomposed.casefold(), name.swapcase())


def _extract_entities(doc: Any, compress: bool, compressor: TermCompressor) -> List[Entity]:
    entities = []
    for name, details in dig_mapping(doc, "components", "messages").items():
        description = dig(details, "description")
        if js_falsy(description) or not js_trim(_as_text(description)):
            continue
        entities.append(
            Entity(
                name=_as_text(name),
                description=compressor.compress(_as_text(description), compress),
            )
        )
    return sorted(entities, key=lambda e: collation_key(e.name))


def is_domain_event(operation: Any) -> bool:
    summary = _as_text(dig(operation, "summary"))
    return DOMAIN_EVENT_MARKER in summary or bool(EVENT_SUMMARY_RE.search(summary))


def _extract_events(doc: Any, compress: bool, compressor: TermCompressor) -> List[str]:
    events = [
        compressor.compress(_as_text(op_name), compress)
        for op_name, op in dig_mapping(doc, "operations").items()
        if is_domain_event(op)
    ]
    return sorted(events)


def summarize_document(
    doc: Any, compress: bool = True, compressor: Optional[TermCompressor] = None
) -> DomainSummary:
    compressor = compressor or DEFAULT_COMPRESSOR
    if js_falsy(doc):
        return DomainSummary.invalid()
    title = dig(doc, "info", "title")
    if js_falsy(title):
        title = UNKNOWN_TITLE
    return DomainSummary(
        service_domain=compressor.compress(title, compress),
        entities=tuple(_extract_entities(doc, compress, compressor)),
        domain_events=tuple(_extract_events(doc, compress, compressor)),
    )


def extract_summary(
    path: str, compress: bool = True, compressor: Optional[TermCompressor] = None
) -> DomainSummary:
    doc = parse_document(path)
    summary = summarize_document(doc, compress, compressor)
    logger.debug(
        "%s: %d entities, %d domain events",
        path,
        len(summary.entities),
        len(summary.domain_events),
    )
    return summary
