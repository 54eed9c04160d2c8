# app/models/domain/mentions.py
import datetime
from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def parse_int(value: Any) -> int:
    """Parses a count stored as text ("1500", " 42 ", "3.0"); anything else is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else 0
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return 0
    return int(parsed) if parsed == parsed and parsed not in (float("inf"), float("-inf")) else 0


LenientInt = Annotated[int, BeforeValidator(parse_int)]


def parse_optional_number(value: Any) -> Optional[float]:
    """Like parse_int, but keeps fractions and reports missing or unreadable values as None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed == parsed and parsed not in (float("inf"), float("-inf")) else None


def parse_optional_int(value: Any) -> Optional[int]:
    parsed = parse_optional_number(value)
    return int(parsed) if parsed is not None else None


LenientOptionalFloat = Annotated[Optional[float], BeforeValidator(parse_optional_number)]
LenientOptionalInt = Annotated[Optional[int], BeforeValidator(parse_optional_int)]


def _to_utc(value: Any) -> Any:
    if isinstance(value, str):
        value = datetime.datetime.fromisoformat(value.strip())
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time.min)
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
    return value


UtcDateTime = Annotated[datetime.datetime, BeforeValidator(_to_utc)]


class MentionFilters(BaseModel):
    """Optional filters shared by the mentions, analytics, sentiment and platforms endpoints.

    Field names are the query-string names. Empty values are treated as absent.
    """
    model_config = ConfigDict(extra='ignore')

    # Project filters
    project_id: Optional[str] = None
    keyword: Optional[str] = None
    project_created_from: Optional[UtcDateTime] = Field(
        None, validation_alias=AliasChoices("project_created_from", "created_at_from"))
    project_created_to: Optional[UtcDateTime] = Field(
        None, validation_alias=AliasChoices("project_created_to", "created_at_to"))

    # Mention filters
    mention_id: Optional[str] = None
    published_from: Optional[UtcDateTime] = None
    published_to: Optional[UtcDateTime] = None
    language: Optional[str] = None
    country: Optional[str] = None
    sentiment: List[str] = Field(default_factory=list)
    social_network: List[str] = Field(default_factory=list)
    tracked_keyword: Optional[str] = None
    domain_influence_min: Optional[float] = None
    domain_influence_max: Optional[float] = None
    social_media_interactions_min: Optional[int] = None
    social_media_interactions_max: Optional[int] = None
    linked: Optional[bool] = None

    @field_validator('*', mode='before')
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, list):
            return [v for v in value if not (isinstance(v, str) and not v.strip())]
        return value

    @field_validator('domain_influence_min', 'domain_influence_max')
    @classmethod
    def _finite(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and (value != value or value in (float("inf"), float("-inf"))):
            raise ValueError("must be a finite number")
        return value

    @field_validator('sentiment', 'social_network', mode='after')
    @classmethod
    def _strip_values(cls, values: List[str]) -> List[str]:
        return [v.strip() for v in values]


# Field names are lists in the query string (?sentiment=a&sentiment=b)
REPEATABLE_FILTERS = ('sentiment', 'social_network')


class MentionRow(BaseModel):
    """One mention as returned by the listing endpoint and consumed by the site aggregator."""
    mention_id: Optional[str] = None
    published: Optional[datetime.datetime] = None
    url: Optional[str] = None
    tracked_keyword: Optional[str] = None
    social_network: Optional[str] = None
    text: Optional[str] = None
    sentiment: Optional[str] = None
    author_name: Optional[str] = None
    username: Optional[str] = None
    followers: LenientInt = 0
    profile_pic: Optional[str] = None
    domain_influence: LenientOptionalFloat = None
    social_media_interactions: LenientOptionalInt = None
    linked: Optional[bool] = None
    project_keyword: Optional[str] = None

    @field_validator('mention_id', mode='before')
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if value is not None else None


class DailyVolume(BaseModel):
    day: str
    mentions: int
    reach: int


class AnalyticsReport(BaseModel):
    success: bool = True
    data: List[DailyVolume]
    period: str
    totalMentions: int
    totalReach: int


class SentimentCounts(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0
    total: int = 0


class SentimentReport(BaseModel):
    success: bool = True
    data: SentimentCounts
    period: str


class PlatformCount(BaseModel):
    social_network: Optional[str] = None
    count: int
