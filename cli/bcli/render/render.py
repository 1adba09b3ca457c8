import json
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from bcli.compress.terms import REPLACEMENTS
from bcli.extract.summary import DomainSummary

FORMATS = ("txt", "json")


class Mode(str, Enum):
    FULL = "full"
    DOMAINS = "domains"
    ENTITIES = "entities"
    EVENTS = "events"


DEFAULT_STEMS = {
    Mode.FULL: "summary_compact",
    Mode.DOMAINS: "service_domains",
    Mode.ENTITIES: "entities",
    Mode.EVENTS: "events",
}

SECTION_MARKERS = {
    Mode.FULL: "#DATA",
    Mode.DOMAINS: "#DOMAINS",
    Mode.ENTITIES: "#ENTITIES",
    Mode.EVENTS: "#EVENTS",
}


def resolve_mode(only_domains: bool = False, only_entities: bool = False, only_events: bool = False) -> Mode:
    if only_domains:
        return Mode.DOMAINS
    if only_entities:
        return Mode.ENTITIES
    if only_events:
        return Mode.EVENTS
    return Mode.FULL


def default_filename(mode: Mode, fmt: str) -> str:
    return f"{DEFAULT_STEMS[mode]}.{fmt}"


def filter_summaries(summaries: Iterable[DomainSummary], text: Optional[str]) -> List[DomainSummary]:
    if not text:
        return list(summaries)
    needle = text.lower()
    return [s for s in summaries if needle in s.service_domain.lower()]


def dict_legend(replacements: Mapping[str, str]) -> str:
    pairs = "".join(f"{abbr}={phrase};" for phrase, abbr in replacements.items())
    return f"#DICT\n{pairs}\n\n"


def _summary_block(s: DomainSummary, entities: bool = True, events: bool = True) -> str:
    lines = [f"SD={s.service_domain}"]
    if entities:
        lines += [f"E={e.name}:{e.description}" for e in s.entities]
    if events:
        lines += [f"DE={de}" for de in s.domain_events]
    return "\n".join(lines) + "\n\n"


def render_text(summaries: Sequence[DomainSummary], mode: Mode) -> str:
    out = SECTION_MARKERS[mode] + "\n"
    if mode is Mode.DOMAINS:
        return out + "\n".join(sorted(f"SD={s.service_domain}" for s in summaries))
    for s in summaries:
        if mode is Mode.FULL:
            out += _summary_block(s)
        elif mode is Mode.ENTITIES:
            out += _summary_block(s, events=False)
        elif s.domain_events:
            out += _summary_block(s, entities=False)
    return out


def json_payload(summaries: Sequence[DomainSummary], mode: Mode) -> Any:
    if mode is Mode.DOMAINS:
        return [s.service_domain for s in summaries]
    if mode is Mode.ENTITIES:
        return [
            {"serviceDomain": s.service_domain, "entities": [e.to_dict() for e in s.entities]}
            for s in summaries
        ]
    if mode is Mode.EVENTS:
        return [
            {"serviceDomain": s.service_domain, "domainEvents": list(s.domain_events)}
            for s in summaries
            if s.domain_events
        ]
    return [s.to_dict() for s in summaries]


def render(
    summaries: Sequence[DomainSummary],
    mode: Mode = Mode.FULL,
    fmt: str = "txt",
    compress: bool = False,
    replacements: Optional[Mapping[str, str]] = None,
) -> str:
    if fmt not in FORMATS:
        raise ValueError(f"Invalid format {fmt!r}. Use: {' | '.join(FORMATS)}")
    if fmt == "json":
        return json.dumps(json_payload(summaries, mode), indent=2, ensure_ascii=False)
    legend = dict_legend(REPLACEMENTS if replacements is None else replacements) if compress else ""
    return legend + render_text(summaries, mode)
