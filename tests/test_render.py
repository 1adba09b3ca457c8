import json

import pytest

from bcli.extract.summary import DomainSummary, Entity
from bcli.render.render import (
    Mode,
    default_filename,
    dict_legend,
    filter_summaries,
    render,
    resolve_mode,
)

CARD = DomainSummary(
    "Card Operations",
    (Entity("CardAuthorization", "Authorize card payments"),),
    ("CardAuthorization/Updated.publish",),
)
PARTY = DomainSummary("Party Reference Data Directory", (Entity("PartyReference", "Details"),), ())


def test_full_text():
    out = render([CARD], Mode.FULL, "txt")
    assert out == (
        "#DATA\n"
        "SD=Card Operations\n"
        "E=CardAuthorization:Authorize card payments\n"
        "DE=CardAuthorization/Updated.publish\n"
        "\n"
    )


def test_dict_legend_only_when_compressed():
    out = render([CARD], Mode.FULL, "txt", compress=True)
    assert out.startswith("#DICT\nSD=Service Domain;D=Description;E=Entity;")
    assert ";Rel=Relationship;\n\n#DATA\n" in out
    assert "#DICT" not in render([CARD], Mode.FULL, "txt", compress=False)
    assert dict_legend({"Card": "Cd"}) == "#DICT\nCd=Card;\n\n"


def test_domains_sorted_without_trailing_newline():
    out = render([PARTY, CARD], Mode.DOMAINS, "txt")
    assert out == "#DOMAINS\nSD=Card Operations\nSD=Party Reference Data Directory"


def test_entities_and_events_sections():
    ents = render([CARD, PARTY], Mode.ENTITIES, "txt")
    assert "DE=" not in ents
    assert "SD=Party Reference Data Directory\nE=PartyReference:Details\n\n" in ents
    events = render([CARD, PARTY], Mode.EVENTS, "txt")
    assert events == "#EVENTS\nSD=Card Operations\nDE=CardAuthorization/Updated.publish\n\n"


def test_json_payloads():
    full = json.loads(render([CARD], Mode.FULL, "json"))
    assert full == [
        {
            "serviceDomain": "Card Operations",
            "entities": [{"name": "CardAuthorization", "description": "Authorize card payments"}],
            "domainEvents": ["CardAuthorization/Updated.publish"],
        }
    ]
    assert json.loads(render([PARTY, CARD], Mode.DOMAINS, "json")) == [
        "Party Reference Data Directory",
        "Card Operations",
    ]
    assert json.loads(render([CARD, PARTY], Mode.EVENTS, "json")) == [
        {"serviceDomain": "Card Operations", "domainEvents": ["CardAuthorization/Updated.publish"]}
    ]
    assert "#DICT" not in render([CARD], Mode.ENTITIES, "json", compress=True)


def test_json_keeps_non_ascii():
    out = render([DomainSummary("Gestión")], Mode.DOMAINS, "json")
    assert "Gestión" in out


def test_invalid_format():
    with pytest.raises(ValueError):
        render([CARD], Mode.FULL, "xml")


def test_filter_is_case_insensitive():
    assert filter_summaries([CARD, PARTY], "card") == [CARD]
    assert filter_summaries([CARD, PARTY], None) == [CARD, PARTY]


def test_mode_precedence_and_filenames():
    assert resolve_mode() is Mode.FULL
    assert resolve_mode(only_entities=True, only_events=True) is Mode.ENTITIES
    assert resolve_mode(True, True, True) is Mode.DOMAINS
    assert default_filename(Mode.FULL, "txt") == "summary_compact.txt"
    assert default_filename(Mode.DOMAINS, "json") == "service_domains.json"
