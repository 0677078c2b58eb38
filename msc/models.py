"""Models for device documents."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SelectableItem(BaseModel):
    """An entry of a browsable collection (input, radio preset)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    display_name: str = Field(alias="name")
    target_id: str = Field(alias="ussi")


class NowPlaying(BaseModel):
    """Now-playing document. The device reports most numbers as strings."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    artist: str | None = Field(None, alias="artistName")
    title: str | None = None
    album: str | None = Field(None, alias="albumName")
    position_ms: int = Field(0, alias="transportPosition")
    duration_ms: int = Field(0, alias="duration")
    codec: str | None = None
    sample_rate: float = Field(0, alias="sampleRate")
    bit_depth: int = Field(0, alias="bitDepth")
    bit_rate: float = Field(0, alias="bitRate")
    source: str | None = None
    source_detail: str | None = Field(None, alias="sourceDetail")

    @field_validator("position_ms", "duration_ms", "bit_depth", mode="before")
    @classmethod
    def _to_int(cls, raw):
        if raw is None or raw == "":
            return 0
        try:
            return int(float(raw))
        except (TypeError, ValueError):
            return 0

    @field_validator("sample_rate", "bit_rate", mode="before")
    @classmethod
    def _to_float(cls, raw):
        if raw is None or raw == "":
            return 0
        try:
            return float(raw)
        except (TypeError, ValueError):
            return 0

    @field_validator("artist", "title", "album", "codec", "source", "source_detail", mode="before")
    @classmethod
    def _to_text(cls, raw):
        if raw is None:
            return None
        return str(raw)
