from pydantic import BaseModel, ConfigDict, Field, field_validator

from epg_aggregator.utils.text import xml_safe_text


class Channel(BaseModel):
    """Channel roster entry"""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., description="Stable channel ID, used to request schedules and tag programmes")
    name: str = Field(default="", description="Display name of the channel")
    stream_name: str = Field(default="", alias="streamName", description="Provider stream name")
    path: str = Field(default="", description="Provider routing path, e.g. '/channel/abc'")
    logo: str = Field(default="", description="URL to channel logo")
    path_alias: str = Field(default="", alias="pathAlias", description="Overrides path when non-empty")

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_scalar(cls, v: object) -> object:
        """YAML may read numeric IDs and names as numbers"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return "" if v is None else v

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Channel ID is required and must not be blank"""
        if not v.strip():
            raise ValueError("Channel id must not be empty")
        return v

    @field_validator("id", "name")
    @classmethod
    def xml_safe(cls, v: str) -> str:
        """ID and name are written to the guide as-is"""
        return xml_safe_text(v)

    @field_validator("stream_name", "path", "logo", "path_alias", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        """YAML nulls behave like missing values"""
        return "" if v is None else v

    @property
    def display_name(self) -> str:
        """Name shown in the guide, falling back to the ID"""
        return self.name or self.id

    @property
    def routing_path(self) -> str:
        """Effective provider path: the alias when set, otherwise the primary path"""
        return self.path_alias or self.path

    def to_roster_dict(self) -> dict[str, str]:
        """Serialize with the roster file's key names"""
        return self.model_dump(by_alias=True)


class RawScheduleEntry(BaseModel):
    """One provider-reported programming slot before normalization"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    show_name: str = Field(default="", alias="data-showname")
    episode_title: str = Field(default="", alias="data-episodetitle")
    list_datetime: str = Field(default="", alias="data-listdatetime", description="Provider start time, e.g. '2025-01-01T10:00:00+00:00'")
    duration: str = Field(default="", alias="data-duration", description="Duration in minutes (as reported)")
    description: str = Field(default="", alias="data-description")

    @field_validator("show_name", "episode_title", "list_datetime", "duration", "description", mode="before")
    @classmethod
    def coerce_to_text(cls, v: object) -> object:
        """Providers report some fields as numbers or null"""
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
