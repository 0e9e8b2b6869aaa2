"""Data models for pr-reporter."""

from pr_reporter.models.config import ReportConfig
from pr_reporter.models.pr import PullRequestRecord, RepositoryRef
from pr_reporter.models.report import (
    AggregateSummary,
    CollectionResult,
    DateRange,
    FetchStats,
    ReportFiles,
    RepositoryOutcome,
    RepositoryStatus,
)

__all__ = [
    "AggregateSummary",
    "CollectionResult",
    "DateRange",
    "FetchStats",
    "PullRequestRecord",
    "ReportConfig",
    "ReportFiles",
    "RepositoryOutcome",
    "RepositoryRef",
    "RepositoryStatus",
]
