# app/services/site_aggregator.py
"""
Folds mention rows into per-site statistics.

Mentions are processed in the order given (the gateway hands them over newest
first). Each mention with a parseable URL lands in exactly one site bucket,
keyed by its hostname with a single leading ``www.`` removed.
"""
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from app.core.config import logger
from app.core.errors import LocalSkip
from app.models.domain.mentions import MentionRow

DEFAULT_PERFORMANCE = 5.0
VISITS_PER_MENTION = 100000


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


@dataclass
class SentimentTally:
    positive: int = 0
    neutral: int = 0
    negative: int = 0

    def record(self, sentiment: Optional[str]) -> None:
        label = (sentiment or "").lower()
        if "positive" in label:
            self.positive += 1
        elif "negative" in label:
            self.negative += 1
        else:
            self.neutral += 1

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative


@dataclass
class SiteAuthor:
    name: str
    username: Optional[str]
    profile_pic: Optional[str]
    followers: int


@dataclass
class SiteStats:
    domain: str
    mention_count: int = 0
    performance_score: float = 0.0
    estimated_visits: int = 0
    sentiment: SentimentTally = field(default_factory=SentimentTally)
    authors: List[SiteAuthor] = field(default_factory=list)

    def add_author(self, mention: MentionRow) -> None:
        if not mention.author_name:
            return
        if any(a.username == mention.username for a in self.authors):
            return
        self.authors.append(SiteAuthor(
            name=mention.author_name,
            username=mention.username,
            profile_pic=mention.profile_pic,
            followers=mention.followers,
        ))

    def fold(self, mention: MentionRow) -> None:
        self.mention_count += 1
        self.add_author(mention)
        self.performance_score = max(self.performance_score, mention_performance(mention))
        self.estimated_visits = math.floor(
            self.mention_count * VISITS_PER_MENTION * (self.performance_score / 10)
        )
        self.sentiment.record(mention.sentiment)

    def to_display(self) -> Dict[str, Any]:
        """The record the sites page renders, with the raw numbers kept alongside."""
        return {
            "site": self.domain,
            "mentions": self.mention_count,
            "visits": f"{self.estimated_visits:,}",
            "performance": f"{math.floor(self.performance_score + 0.5)}/10",
            "sentiment": asdict(self.sentiment),
            "authors": [asdict(a) for a in self.authors],
            "estimated_visits": self.estimated_visits,
            "performance_score": self.performance_score,
        }


def mention_performance(mention: MentionRow) -> float:
    """Score in [1, 10] from domain influence (0-100) plus up to 5 points of interactions."""
    score = DEFAULT_PERFORMANCE
    if mention.domain_influence is not None:
        score = clamp(mention.domain_influence / 10, 1, 10)
    if mention.social_media_interactions is not None:
        score = clamp(score + clamp(mention.social_media_interactions / 100, 0, 5), 1, 10)
    return score


def site_domain(url: Optional[str]) -> str:
    """Hostname of ``url`` without one leading ``www.``; raises LocalSkip when there is none."""
    if not url or not url.strip():
        raise LocalSkip("mention has no URL")
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError as e:
        raise LocalSkip(f"invalid URL {url!r}: {e}") from e
    if not parts.scheme or not hostname:
        raise LocalSkip(f"invalid URL {url!r}")
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def aggregate_sites(mentions: Iterable[MentionRow]) -> List[SiteStats]:
    """Groups mentions by site; sites with more mentions first, ties in first-seen order."""
    sites: Dict[str, SiteStats] = {}
    for mention in mentions:
        try:
            domain = site_domain(mention.url)
        except LocalSkip as e:
            logger.warning(f"Skipping mention {mention.mention_id}: {e}")
            continue
        site = sites.get(domain)
        if site is None:
            site = sites[domain] = SiteStats(domain=domain)
        site.fold(mention)

    return sorted(sites.values(), key=lambda s: s.mention_count, reverse=True)
