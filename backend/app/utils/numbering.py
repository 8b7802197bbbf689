"""Shared registry-code generation.

Format tokens:
  {date}       → YYYYMMDD
  {seq:N}      → zero-padded sequence number, N digits, one above the
                 highest issued today; resets daily per
                 prefix and per organization

Default formats:
  farmer:    FRM-{date}-{seq:3}

Two concurrent creates can compute the same code; the unique constraint
on (organization_id, code) rejects the second one.
"""

import re
from datetime import date

from app.store.client import StoreClient

DEFAULT_FORMATS = {
    "farmer": "FRM-{date}-{seq:3}",
}

# Map entity types to their table and code column
ENTITY_TABLE_MAP = {
    "farmer": ("farmers", "farmer_code"),
}

_SEQ_RE = re.compile(r"\{seq:(\d+)\}")


def _build_prefix(fmt: str, today_str: str) -> str:
    """Build the prefix portion of the code (everything before {seq:N})."""
    prefix = fmt.replace("{date}", today_str)
    prefix = re.sub(r"\{seq:\d+\}.*$", "", prefix)
    return prefix


async def _highest_existing(
    store: StoreClient, entity: str, organization_id: str, prefix: str, suffix: str
) -> int:
    """Highest sequence number among the organization's codes with `prefix`.

    Codes are never reused: after a delete the next code still follows
    the highest one issued.  Codes whose sequence part isn't numeric
    (hand-entered ones) are ignored.
    """
    table_name, column_name = ENTITY_TABLE_MAP[entity]
    query = (
        store.table(table_name)
        .eq("organization_id", organization_id)
        .startswith(column_name, prefix)
    )
    highest = 0
    for row in (await store.select(query)).rows:
        seq = row[column_name][len(prefix):]
        if suffix:
            if not seq.endswith(suffix):
                continue
            seq = seq[: -len(suffix)]
        if seq.isdigit():
            highest = max(highest, int(seq))
    return highest


async def generate_code(
    store: StoreClient,
    entity: str,
    organization_id: str,
    today: date | None = None,
) -> str:
    """Generate the next sequential code for `entity` within an organization.

    Example: FRM-20240501-004 when FRM-20240501-003 is the highest code
    issued today.
    """
    fmt = DEFAULT_FORMATS[entity]
    today_str = (today or date.today()).strftime("%Y%m%d")
    prefix = _build_prefix(fmt, today_str)

    match = _SEQ_RE.search(fmt)
    width = int(match.group(1)) if match else 3
    suffix = fmt[match.end():].replace("{date}", today_str) if match else ""

    highest = await _highest_existing(store, entity, organization_id, prefix, suffix)
    return f"{prefix}{str(highest + 1).zfill(width)}{suffix}"
