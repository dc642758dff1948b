from dataclasses import dataclass
from datetime import datetime

from linkregistry.types import SerializedClick


@dataclass(frozen=True)
class ClickEventModel:
    """Represent one successful resolution of a shortcode.

    Attributes:
        timestamp (datetime):
            Moment the shortcode was resolved (timezone-aware, UTC).
        source (str):
            Categorical label of the referral channel, e.g. 'Email'.
        location (str):
            Categorical label of the geographic origin, e.g. 'Berlin, DE'.
        agent (str):
            Opaque client-identifying string (usually a User-Agent header).

    Example:
        >>> from datetime import datetime, UTC
        >>> click = ClickEventModel(
        ...     timestamp=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        ...     source='Direct',
        ...     location='London, UK',
        ...     agent='curl/8.5.0',
        ... )
        >>> click.to_dict()['timestamp']
        '2025-10-15T12:00:00+00:00'
    """

    timestamp: datetime
    source: str
    location: str
    agent: str

    def to_dict(self) -> SerializedClick:
        return {
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
            'location': self.location,
            'agent': self.agent,
        }

    @classmethod
    def from_dict(cls, data: SerializedClick) -> 'ClickEventModel':
        return cls(
            timestamp=datetime.fromisoformat(data['timestamp']),
            source=data['source'],
            location=data['location'],
            agent=data['agent'],
        )
