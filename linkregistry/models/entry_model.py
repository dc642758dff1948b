from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from linkregistry.models.click_event_model import ClickEventModel
from linkregistry.types import SerializedEntry


@dataclass(frozen=True)
class EntryModel:
    """Represent a shortcode registered against a target URL.

    Expiry and retention status are never stored; they are derived from
    `expires_at` and the moment of the read.

    Attributes:
        code (str):
            Unique short identifier (1-20 alphanumeric characters).
        target (str):
            The original long URL that the shortcode redirects to.
        created_at (datetime):
            Moment of creation (timezone-aware, UTC).
        expires_at (datetime):
            `created_at + validity_minutes`, after which the shortcode
            no longer resolves.
        validity_minutes (int):
            Validity period requested at creation.
        clicks (tuple[ClickEventModel, ...]):
            Recorded resolutions in chronological order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
        >>> entry = EntryModel(
        ...     code='abc123',
        ...     target='https://example.com/article/123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ...     validity_minutes=30,
        ... )
        >>> entry.click_count
        0
        >>> entry.is_expired(now + timedelta(minutes=31))
        True
    """

    code: str
    target: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: int
    clicks: tuple[ClickEventModel, ...] = field(default_factory=tuple)

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_purgeable(self, now: datetime, retention: timedelta) -> bool:
        """True once the entry has been expired for longer than `retention`."""
        return self.is_expired(now) and self.expires_at < now - retention

    def with_click(self, click: ClickEventModel) -> 'EntryModel':
        """Return a copy of this entry with `click` appended to its clicks."""
        return replace(self, clicks=(*self.clicks, click))

    def to_dict(self) -> SerializedEntry:
        return {
            'code': self.code,
            'target': self.target,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
            'validity_minutes': self.validity_minutes,
            'clicks': [click.to_dict() for click in self.clicks],
        }

    @classmethod
    def from_dict(cls, data: SerializedEntry) -> 'EntryModel':
        return cls(
            code=data['code'],
            target=data['target'],
            created_at=datetime.fromisoformat(data['created_at']),
            expires_at=datetime.fromisoformat(data['expires_at']),
            validity_minutes=int(data['validity_minutes']),
            clicks=tuple(ClickEventModel.from_dict(click) for click in data.get('clicks', [])),
        )
