"""Table format output formatter"""

from datetime import datetime
from typing import List, Optional

from ...core.models import Verdict, VulnerabilityRecord
from ...retrieval.context import format_score


class TableFormatter:
    """Plain-text tables for terminal output"""

    @staticmethod
    def format_records(records: List[VulnerabilityRecord],
                       last_refresh: Optional[datetime] = None) -> str:
        if not records:
            return "No CVEs cached"

        lines = []
        lines.append(f"{'CVE ID':<18} {'CVSS':>5}  {'VENDOR':<14} {'PRODUCT':<24} PUBLISHED")
        lines.append("-" * 80)

        for record in records:
            published = record.published[:10] if record.published else "Unknown"
            product = record.product[:24] if record.product else "-"
            lines.append(
                f"{record.cve_id:<18} {format_score(record.cvss_score):>5}  "
                f"{(record.vendor or '-'):<14} {product:<24} {published}"
            )

        lines.append("")
        summary = f"{len(records)} CVE(s)"
        if last_refresh:
            summary += f", refreshed {last_refresh.strftime('%Y-%m-%d %H:%M:%S UTC')}"
        lines.append(summary)
        return "\n".join(lines)

    @staticmethod
    def format_verdict(verdict: Verdict) -> str:
        lines = [
            f"SEVERITY: {verdict.severity.upper()}",
            "",
            "EXPLANATION:",
            f"  {verdict.explanation}",
            "",
            "RECOMMENDED ACTION:",
            f"  {verdict.recommended_action}",
        ]
        return "\n".join(lines)
