"""
Trend Schemas
Monthly, issue and channel rollups shown on the dashboard analytics panel.
"""
from typing import List

from review_dashboard.schemas.base import CamelModel


class MonthlyStat(CamelModel):
    month: str
    total_reviews: int
    average_rating: float
    approval_rate: float


class CommonIssue(CamelModel):
    issue: str
    count: int
    percentage: float


class ChannelPerformance(CamelModel):
    channel: str
    total_reviews: int
    average_rating: float
    approval_rate: float


class Trend(CamelModel):
    monthly_stats: List[MonthlyStat] = []
    common_issues: List[CommonIssue] = []
    channel_performance: List[ChannelPerformance] = []
