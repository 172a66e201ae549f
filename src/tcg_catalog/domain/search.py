"""Structural search classification and collector-number formatting.

A raw query is exactly one of:
  EXACT_NUMBER   "71/182"  number AND printed total
  PREFIX_NUMBER  "71/"     number, any total
  PLAIN_NUMBER   "71"      number alone
  TEXT           anything else (case-insensitive name match)

Numbers compare after stripping leading zeros and left-padding to 3 digits,
so "71/182" and "071/182" classify identically.
"""

import re
from dataclasses import dataclass
from enum import Enum

NO_NUMBER_PLACEHOLDER = "—"

_EXACT_RE = re.compile(r"^(\d+)/(\d+)$")
_PREFIX_RE = re.compile(r"^(\d+)/$")
_PLAIN_RE = re.compile(r"^\d+$")


class SearchKind(str, Enum):
    EXACT_NUMBER = "exact_number"
    PREFIX_NUMBER = "prefix_number"
    PLAIN_NUMBER = "plain_number"
    TEXT = "text"


@dataclass(frozen=True)
class SearchIntent:
    kind: SearchKind
    number: str | None = None
    total: int | None = None
    text: str = ""

    @property
    def is_numeric(self) -> bool:
        return self.kind != SearchKind.TEXT

    @property
    def is_empty(self) -> bool:
        return self.kind == SearchKind.TEXT and not self.text


def normalize_number(raw: str) -> str:
    """'71' -> '071', '0071' -> '071', '0' -> '000', '1234' -> '1234'."""
    stripped = raw.strip().lstrip("0") or "0"
    return stripped.zfill(3)


def parse_search(raw: str | None) -> SearchIntent:
    q = (raw or "").strip()
    if not q:
        return SearchIntent(SearchKind.TEXT, text="")

    m = _EXACT_RE.match(q)
    if m:
        return SearchIntent(
            SearchKind.EXACT_NUMBER, number=normalize_number(m.group(1)), total=int(m.group(2))
        )
    m = _PREFIX_RE.match(q)
    if m:
        return SearchIntent(SearchKind.PREFIX_NUMBER, number=normalize_number(m.group(1)))
    if _PLAIN_RE.match(q):
        return SearchIntent(SearchKind.PLAIN_NUMBER, number=normalize_number(q))
    return SearchIntent(SearchKind.TEXT, text=q)


def matches(intent: SearchIntent, number: str | None, printed_total: int | None,
            name: str) -> bool:
    """In-memory equivalent of the SQL predicate built from ``intent``."""
    if intent.kind == SearchKind.TEXT:
        return intent.text.lower() in name.lower()
    if number is None or normalize_number(number) != intent.number:
        return False
    if intent.kind == SearchKind.EXACT_NUMBER:
        return printed_total == intent.total
    return True


def format_collector_number(number: str | None, printed_total: int | None) -> str:
    """'7', 182 -> '007/182'; '7', None -> '007'; None -> '—'."""
    if not number:
        return NO_NUMBER_PLACEHOLDER
    padded = str(number).zfill(3)
    if printed_total is not None:
        return f"{padded}/{printed_total}"
    return padded


def format_item_subtitle(
    number: str | None, printed_total: int | None, group_name: str | None
) -> str:
    """'071/182 · Group Name' (group omitted when unknown)."""
    num = format_collector_number(number, printed_total)
    if group_name:
        return f"{num} · {group_name}"
    return num
