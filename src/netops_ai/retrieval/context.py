"""Render CVEs as the context block embedded in model prompts"""

from typing import Sequence

from ..core.models import VulnerabilityRecord


MAX_CONTEXT_RECORDS = 5

OPEN_MARKER = "<Rag>"
CLOSE_MARKER = "</Rag>"


def format_score(score: float) -> str:
    if not score or score <= 0:
        return "N/A"
    return f"{score:.1f}"


def format_record(record: VulnerabilityRecord) -> str:
    return f"{record.cve_id} - {record.vendor}/{record.product} - CVSS {format_score(record.cvss_score)}"


def render_context(records: Sequence[VulnerabilityRecord]) -> str:
    """Context block for the first five records, in the order given

    Returns an empty string for no records so callers can drop the block.
    """
    if not records:
        return ""

    lines = [OPEN_MARKER]
    lines.extend(format_record(record) for record in list(records)[:MAX_CONTEXT_RECORDS])
    lines.append(CLOSE_MARKER)
    return "\n".join(lines) + "\n"
