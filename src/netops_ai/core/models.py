"""Core data models for NetOps AI Core"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse

from .errors import InvalidEvent


class Severity(Enum):
    """Verdict severity vocabulary"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class VulnerabilityRecord:
    """A single CVE entry as kept in the knowledge cache"""
    cve_id: str
    description: str = ""
    published: str = ""
    cvss_score: float = 0.0
    vendor: str = ""
    product: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.cve_id,
            'description': self.description,
            'published': self.published,
            'cvss_score': self.cvss_score,
            'vendor': self.vendor,
            'product': self.product,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VulnerabilityRecord':
        return cls(
            cve_id=str(data['id']),
            description=data.get('description') or "",
            published=data.get('published') or "",
            cvss_score=float(data.get('cvss_score') or 0.0),
            vendor=(data.get('vendor') or "").lower(),
            product=data.get('product') or "",
        )


@dataclass
class CacheSnapshot:
    """Timestamped full set of cached records"""
    timestamp: datetime
    records: List[VulnerabilityRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'cves': [record.to_dict() for record in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheSnapshot':
        return cls(
            timestamp=isoparse(data['timestamp']),
            records=[VulnerabilityRecord.from_dict(item) for item in data.get('cves') or []],
        )


@dataclass
class Event:
    """Inbound network-operations event"""
    type: str
    message: str
    source_host: Optional[str] = None
    source_ip: Optional[str] = None
    event_type: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> 'Event':
        """Build an event from a decoded request payload"""
        if not isinstance(payload, dict):
            raise InvalidEvent("event payload must be a JSON object")

        for required in ('type', 'message'):
            value = payload.get(required)
            if not isinstance(value, str) or not value.strip():
                raise InvalidEvent(f"event field '{required}' is required")

        optional = {}
        for name in ('source_host', 'source_ip', 'event_type', 'category', 'severity'):
            value = payload.get(name)
            if value is not None:
                optional[name] = str(value)

        return cls(type=payload['type'], message=payload['message'], **optional)

    def source_metadata(self) -> Dict[str, str]:
        """Non-empty source fields, in declaration order; the caller's severity is left out"""
        data = asdict(self)
        for name in ('type', 'message', 'severity'):
            data.pop(name)
        return {key: value for key, value in data.items() if value}


@dataclass
class Verdict:
    """Severity classification returned for an event"""
    severity: str
    explanation: str
    recommended_action: str

    @classmethod
    def degraded(cls, explanation: str, recommended_action: str) -> 'Verdict':
        return cls(
            severity=Severity.UNKNOWN.value,
            explanation=explanation,
            recommended_action=recommended_action,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
