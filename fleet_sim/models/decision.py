from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Deque, Dict, Any, Iterator, List, Optional
from .base import ModelBase

DEFAULT_LOG_CAPACITY = 10

class DecisionImpact(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

class DecisionSource(Enum):
    RULE = "rule"
    FILLER = "filler"

@dataclass(frozen=True)
class DecisionTemplate:
    """Canned decision text before it is stamped with a time"""
    action: str
    reason: str
    impact: DecisionImpact

@dataclass
class DecisionLogEntry(ModelBase):
    timestamp: datetime
    action: str
    reason: str
    impact: DecisionImpact
    source: DecisionSource = DecisionSource.RULE

    @classmethod
    def from_template(cls, template: DecisionTemplate, timestamp: datetime,
                      source: DecisionSource) -> 'DecisionLogEntry':
        return cls(
            timestamp=timestamp,
            action=template.action,
            reason=template.reason,
            impact=template.impact,
            source=source
        )

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.action} ({self.impact.value})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'action': self.action,
            'reason': self.reason,
            'impact': self.impact.value,
            'source': self.source.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DecisionLogEntry':
        return cls(
            timestamp=datetime.fromisoformat(data['timestamp']),
            action=data['action'],
            reason=data['reason'],
            impact=DecisionImpact(data['impact']),
            source=DecisionSource(data.get('source', DecisionSource.RULE.value))
        )

@dataclass
class DecisionLog(ModelBase):
    """Newest-first ring buffer of decision entries.

    Pushing onto a full log evicts the oldest entry.
    """
    capacity: int = DEFAULT_LOG_CAPACITY
    _entries: Deque[DecisionLogEntry] = field(default_factory=deque, repr=False)

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(f"Decision log capacity must be positive, got {self.capacity}")
        self._entries = deque(self._entries, maxlen=self.capacity)

    def push(self, entry: DecisionLogEntry) -> None:
        self._entries.appendleft(entry)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def latest(self) -> Optional[DecisionLogEntry]:
        return self._entries[0] if self._entries else None

    def recent(self, limit: Optional[int] = None) -> List[DecisionLogEntry]:
        entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DecisionLogEntry]:
        return iter(list(self._entries))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'capacity': self.capacity,
            'entries': [entry.to_dict() for entry in self._entries]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DecisionLog':
        log = cls(capacity=data.get('capacity', DEFAULT_LOG_CAPACITY))
        # entries are stored newest first
        for entry in reversed(data.get('entries', [])):
            log.push(DecisionLogEntry.from_dict(entry))
        return log
