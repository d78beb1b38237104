"""
Shared domain primitives: the clock and the event envelope.
"""
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID, uuid4


def utc_now() -> datetime:
    """Return current UTC timestamp."""
    return datetime.now(timezone.utc)


def _plain(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(kw_only=True)
class DomainEvent:
    """
    Something that happened to a principal or its session.

    Subclasses set ``EVENT_TYPE`` and declare their payload as dataclass
    fields; everything except the envelope fields becomes ``data``.
    """
    EVENT_TYPE: ClassVar[str] = "domain.event"

    principal_id: Optional[UUID] = None
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utc_now)

    @property
    def event_type(self) -> str:
        return self.EVENT_TYPE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to dictionary for messaging."""
        return {
            'event_id': str(self.event_id),
            'event_type': self.event_type,
            'occurred_at': self.occurred_at.isoformat(),
            'data': self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        envelope = ('event_id', 'occurred_at')
        return {
            f.name: _plain(getattr(self, f.name))
            for f in fields(self)
            if f.name not in envelope
        }
