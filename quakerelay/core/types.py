"""Domain types for the P2PQuake feed, one model per JSON payload shape."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class MessageCode(IntEnum):
    """Discriminator values carried in the ``code`` field of feed messages."""

    JMA_QUAKE = 551
    JMA_TSUNAMI = 552
    EEW_DETECTION = 554
    PEERS_AREA = 555
    EEW = 556
    USER_QUAKE = 561
    USER_QUAKE_EVALUATION = 9611


class _FeedModel(BaseModel):
    """Base for payload models: camelCase aliases, unknown keys ignored.

    A JSON null is treated like an absent key, so the field default applies.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Issue(_FeedModel):
    """Issuer metadata of a JMA bulletin."""

    source: str = ""
    time: str = ""
    type: str = ""
    correct: str = ""


class Hypocenter(_FeedModel):
    """Hypocenter detail. Negative magnitude/depth mean "unknown" upstream."""

    name: str = ""
    latitude: float | None = None
    longitude: float | None = None
    depth: float | None = None
    magnitude: float | None = None


class Earthquake(_FeedModel):
    """Earthquake summary of a JMA seismic-intensity bulletin."""

    time: str = ""
    hypocenter: Hypocenter | None = None
    max_scale: int = Field(default=-1, alias="maxScale")
    domestic_tsunami: str = Field(default="", alias="domesticTsunami")
    foreign_tsunami: str = Field(default="", alias="foreignTsunami")


class ObservationPoint(_FeedModel):
    """A single observation station's reported intensity.

    Missing ``pref`` or ``scale`` decode to ``""`` and ``-1``; the aggregator
    skips such points.
    """

    pref: str = ""
    addr: str = ""
    is_area: bool = Field(default=False, alias="isArea")
    scale: int = -1


class QuakeReport(_FeedModel):
    """Seismic-intensity bulletin (code 551)."""

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    code: int = MessageCode.JMA_QUAKE
    time: str = ""
    issue: Issue = Issue()
    earthquake: Earthquake = Earthquake()
    points: list[ObservationPoint] = Field(default_factory=list)

    @field_validator("points", mode="before")
    @classmethod
    def _skip_null_points(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [p for p in v if p is not None]
        return v


class UnhandledMessage(_FeedModel):
    """Any feed message whose discriminator this relay does not act on."""

    id: str = Field(default="", validation_alias=AliasChoices("id", "_id"))
    code: int


FeedMessage = QuakeReport | UnhandledMessage
