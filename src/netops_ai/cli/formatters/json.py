"""JSON format output formatter"""

import json
from typing import List

from ...core.models import Verdict, VulnerabilityRecord


class JSONFormatter:
    """JSON format output formatter"""

    @staticmethod
    def format_verdict(verdict: Verdict, compact: bool = False) -> str:
        if compact:
            return json.dumps(verdict.to_dict())
        return json.dumps(verdict.to_dict(), indent=2)

    @staticmethod
    def format_records(records: List[VulnerabilityRecord]) -> str:
        return json.dumps([record.to_dict() for record in records], indent=2)
