import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

REPLACEMENTS: Mapping[str, str] = MappingProxyType(
    {
        "Service Domain": "SD",
        "Description": "D",
        "Entity": "E",
        "Value Object": "VO",
        "Aggregate": "AG",
        "Domain Event": "DE",
        "Workstep": "WS",
        "Procedure": "PR",
        "Reference": "Ref",
        "Identifier": "ID",
        # common functional domains
        "Account": "Acct",
        "Customer": "Cust",
        "Contact": "Cntct",
        "Product": "Prod",
        "Payment": "Pay",
        "Corporate": "Corp",
        "Consumer": "Cons",
        "Market": "Mkt",
        "Financial": "Fin",
        "Branch": "Br",
        "Channel": "Chan",
        "Collateral": "Coll",
        "Party": "Party",
        # activities / operations
        "Assessment": "Asmt",
        "Notification": "Ntfy",
        "Instruction": "Instr",
        "Transaction": "Tx",
        "Fulfillment": "Ffmt",
        "Reconciliation": "Recon",
        "Clearing": "Clrg",
        "Settlement": "Settl",
        "Execution": "Exec",
        "Authorization": "Auth",
        "Agreement": "Agr",
        "Processing": "Proc",
        "Evaluation": "Eval",
        "Resolution": "Res",
        "Analysis": "Analys",
        "Operation": "Ops",
        "Operations": "Ops",
        # states / outcomes
        "Created": "Crtd",
        "Updated": "Updtd",
        "Outcome": "Outc",
        # management / structure
        "Management": "Mgmt",
        "Administration": "Adm",
        "Directory": "Dir",
        "Services": "Svcs",
        "Reporting": "Rpt",
        "Compliance": "Comp",
        "Planning": "Plan",
        "Matching": "Match",
        "History": "Hist",
        "Design": "Des",
        "Relationship": "Rel",
    }
)

# ECMAScript WhiteSpace + LineTerminator, the set behind \s and trim()
JS_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680"
    + "".join(chr(c) for c in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
WS_RE = re.compile("[" + re.escape(JS_WHITESPACE) + "]+")


def js_trim(text: str) -> str:
    return text.strip(JS_WHITESPACE)


def collapse_ws(text: str) -> str:
    return js_trim(WS_RE.sub(" ", text))


def _fold(ch: str) -> str:
    # simple uppercase, but never folding a non-ASCII char onto ASCII
    up = ch.upper()
    if len(up) != 1 or (ord(ch) >= 128 and ord(up) < 128):
        return ch
    return up


def _case_variants(ch: str) -> List[str]:
    candidates = {ch, ch.upper(), ch.lower(), ch.upper().lower(), ch.lower().upper()}
    return sorted(c for c in candidates if len(c) == 1 and _fold(c) == _fold(ch))


def phrase_pattern(phrase: str) -> "re.Pattern[str]":
    """Case-insensitive literal pattern for ``phrase``.

    Case variants are spelled out per character, so "s" does not match the
    long s (U+017F) and "k" does not match the Kelvin sign.
    """
    parts = []
    for ch in phrase:
        variants = _case_variants(ch)
        if len(variants) == 1:
            parts.append(re.escape(ch))
        else:
            parts.append("[" + "".join(re.escape(v) for v in variants) + "]")
    return re.compile("".join(parts))


def merge_replacements(
    base: Mapping[str, str], extra: Optional[Mapping[str, str]] = None
) -> Mapping[str, str]:
    """Overlay ``extra`` on ``base``.

    Phrases already in ``base`` keep their position and take the new
    abbreviation; new phrases are appended in the order given.
    """
    merged: Dict[str, str] = dict(base)
    for phrase, abbr in (extra or {}).items():
        merged[str(phrase)] = str(abbr)
    return MappingProxyType(merged)


class TermCompressor:
    """Applies an ordered phrase -> abbreviation dictionary to text.

    Each phrase is matched as a literal, case-insensitive substring (not a
    whole word) and every occurrence is replaced. Entries run one after the
    other over the same running text, so a phrase that contains another may
    see its input already rewritten.
    """

    def __init__(self, replacements: Mapping[str, str] = REPLACEMENTS):
        self._replacements = MappingProxyType(dict(replacements))
        self._patterns = [
            (phrase_pattern(phrase), abbr)
            for phrase, abbr in self._replacements.items()
        ]

    @property
    def replacements(self) -> Mapping[str, str]:
        return self._replacements

    def compress(self, text: Any, apply: bool = True) -> str:
        if not isinstance(text, str):
            return ""
        if not apply:
            return collapse_ws(text)
        for pattern, abbr in self._patterns:
            # callable replacement keeps backslashes in abbr literal
            text = pattern.sub(lambda _m, a=abbr: a, text)
        return collapse_ws(text)


DEFAULT_COMPRESSOR = TermCompressor()


def compress_text(text: Any, apply: bool = True) -> str:
    return DEFAULT_COMPRESSOR.compress(text, apply)
