# app/db/filters.py
"""
Translates optional request filters into a parameterized WHERE clause.

Every endpoint that reads the ``mentions`` table goes through ``build_where``;
user values are only ever bound as ``:pN`` parameters, numbered from 1 in the
order the conditions are appended.
"""
import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import TextClause, bindparam, text

from app.core.errors import ValidationError
from app.models.domain.mentions import MentionFilters

MIN_DAYS = 1
MAX_DAYS = 365
DEFAULT_DAYS = "7"

EQUALS = "eq"
CONTAINS = "contains"
AT_LEAST = "gte"
AT_MOST = "lte"
ONE_OF = "in"

# (MentionFilters field, column, operator), applied in this order
FILTER_TABLE: Tuple[Tuple[str, str, str], ...] = (
    ("project_id", "mentions.project_id", EQUALS),
    ("keyword", "projects.keyword", CONTAINS),
    ("project_created_from", "projects.created_at", AT_LEAST),
    ("project_created_to", "projects.created_at", AT_MOST),
    ("mention_id", "mentions.mention_id", EQUALS),
    ("published_from", "mentions.published", AT_LEAST),
    ("published_to", "mentions.published", AT_MOST),
    ("language", "mentions.language", EQUALS),
    ("country", "mentions.country", EQUALS),
    ("sentiment", "mentions.sentiment", ONE_OF),
    ("social_network", "mentions.social_network", ONE_OF),
    ("tracked_keyword", "mentions.tracked_keyword", CONTAINS),
    ("domain_influence_min", "mentions.domain_influence", AT_LEAST),
    ("domain_influence_max", "mentions.domain_influence", AT_MOST),
    ("social_media_interactions_min", "mentions.social_media_interactions", AT_LEAST),
    ("social_media_interactions_max", "mentions.social_media_interactions", AT_MOST),
    ("linked", "mentions.linked", EQUALS),
)


@dataclass
class WhereClause:
    conditions: List[str] = field(default_factory=list)
    args: List[Any] = field(default_factory=list)

    def _placeholder(self, value: Any) -> str:
        self.args.append(value)
        return f":p{len(self.args)}"

    def add(self, template: str, *values: Any) -> "WhereClause":
        """Appends a condition; each ``{}`` in template is replaced by the next bound value."""
        placeholders = [self._placeholder(v) for v in values]
        self.conditions.append(template.format(*placeholders))
        return self

    def add_raw(self, condition: str) -> "WhereClause":
        """Appends a condition that binds nothing (fixed SQL only, never user input)."""
        self.conditions.append(condition)
        return self

    def equals(self, column: str, value: Any) -> "WhereClause":
        return self.add(f"{column} = {{}}", value)

    def contains(self, column: str, value: str) -> "WhereClause":
        return self.add(f"LOWER({column}) LIKE LOWER({{}})", f"%{value}%")

    def at_least(self, column: str, value: Any) -> "WhereClause":
        return self.add(f"{column} >= {{}}", value)

    def at_most(self, column: str, value: Any) -> "WhereClause":
        return self.add(f"{column} <= {{}}", value)

    def one_of(self, column: str, values: List[Any]) -> "WhereClause":
        if not values:
            return self
        markers = ", ".join("{}" for _ in values)
        return self.add(f"{column} IN ({markers})", *values)

    @property
    def sql(self) -> str:
        return " AND ".join(self.conditions)

    @property
    def params(self) -> Dict[str, Any]:
        return {f"p{i}": value for i, value in enumerate(self.args, start=1)}

    def __bool__(self) -> bool:
        return bool(self.conditions)

    def clause(self) -> TextClause:
        """The conditions as a bound SQLAlchemy text clause."""
        return text(self.sql).bindparams(
            *[bindparam(name, value) for name, value in self.params.items()]
        )


_APPLY = {
    EQUALS: WhereClause.equals,
    CONTAINS: WhereClause.contains,
    AT_LEAST: WhereClause.at_least,
    AT_MOST: WhereClause.at_most,
    ONE_OF: WhereClause.one_of,
}


def build_where(filters: MentionFilters, where: Optional[WhereClause] = None) -> WhereClause:
    """Appends one condition per provided filter to ``where`` (a new clause if omitted)."""
    where = where if where is not None else WhereClause()
    for name, column, operator in FILTER_TABLE:
        value = getattr(filters, name)
        if value is None or (operator == ONE_OF and not value):
            continue
        _APPLY[operator](where, column, value)
    return where


def parse_days(raw: Optional[str]) -> int:
    """Validates the ``days`` lookback parameter: an integer in [1, 365], default 7."""
    value = raw.strip() if raw and raw.strip() else DEFAULT_DAYS
    try:
        days = int(value)
    except ValueError:
        raise ValidationError(
            f"Invalid days parameter. Must be a number between {MIN_DAYS} and {MAX_DAYS}.",
            field="days",
        )
    if days < MIN_DAYS or days > MAX_DAYS:
        raise ValidationError(
            f"Invalid days parameter. Must be a number between {MIN_DAYS} and {MAX_DAYS}.",
            field="days",
        )
    return days


def lookback_where(days: int, now: Optional[datetime.datetime] = None) -> WhereClause:
    """A clause whose first condition is the mandatory ``published within N days`` bound."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return WhereClause().at_least("mentions.published", now - datetime.timedelta(days=days))
