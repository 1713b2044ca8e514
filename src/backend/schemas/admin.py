"""
Admin overview schemas.
"""

from datetime import datetime
from typing import Optional

from schemas.base import APIModel
from schemas.user import UserSummary


class SubmissionTitleCounts(APIModel):
    enrollment: int = 0
    grades: int = 0


class SubmissionSemesterCounts(APIModel):
    first: int = 0
    second: int = 0


class SubmissionMetrics(APIModel):
    total: int = 0
    pending: int = 0
    by_title: SubmissionTitleCounts
    by_semester: SubmissionSemesterCounts


class UserMetrics(APIModel):
    total: int = 0


class PollMetrics(APIModel):
    total: int = 0
    active: int = 0
    votes: int = 0


class OverviewMetrics(APIModel):
    users: UserMetrics
    submissions: SubmissionMetrics
    polls: PollMetrics


class RecentSubmission(APIModel):
    id: str
    title: str
    semester: str
    description: Optional[str] = None
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


class RecentActivity(APIModel):
    users: list[UserSummary]
    submissions: list[RecentSubmission]


class AdminOverview(APIModel):
    success: bool = True
    metrics: OverviewMetrics
    recent: RecentActivity
