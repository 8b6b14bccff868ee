"""Domain types for the notification subsystem."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AlertField(BaseModel):
    """One name/value row of an embed."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    inline: bool = True


class AlertMessage(BaseModel):
    """Rendered alert ready for dispatch to webhook channels.

    ``regions`` carries the affected display region names so the region
    filter does not have to re-parse field values.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    fields: tuple[AlertField, ...] = ()
    color: int = 0
    regions: tuple[str, ...] = ()

    def to_embed(self) -> dict[str, object]:
        """Webhook embed body."""
        return {
            "title": self.title,
            "description": self.description,
            "fields": [f.model_dump() for f in self.fields],
            "color": self.color,
        }


class DispatchResult(BaseModel):
    """Outcome of one fan-out attempt."""

    model_config = ConfigDict(frozen=True)

    sent: int = 0
    total: int = 0
    skipped: bool = False
    failed: tuple[str, ...] = ()

    @property
    def all_sent(self) -> bool:
        return not self.skipped and self.sent == self.total
