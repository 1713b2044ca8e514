"""
Admin overview statistics.

Counts users, certificate submissions and polls for the staff dashboard and
lists the most recent users and submissions. Figures are computed on every
request; the tables involved are small.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.certificate import CertificateSubmission, CertificateTitle, Semester
from models.poll import Poll
from models.user import User
from models.vote import Vote
from schemas.admin import (
    AdminOverview,
    OverviewMetrics,
    PollMetrics,
    RecentActivity,
    SubmissionMetrics,
    SubmissionSemesterCounts,
    SubmissionTitleCounts,
    UserMetrics,
)
from schemas.converters import submission_model_to_recent, user_model_to_summary

RECENT_LIMIT = 10


class StatsService:
    """Service for computing the admin dashboard overview."""

    def __init__(self, db: AsyncSession, recent_limit: int = RECENT_LIMIT):
        self.db = db
        self.recent_limit = recent_limit

    async def get_overview(self) -> AdminOverview:
        """Compute fresh metrics and recent activity."""
        return AdminOverview(
            metrics=OverviewMetrics(
                users=UserMetrics(total=await self._count(User.id)),
                submissions=await self._submission_metrics(),
                polls=PollMetrics(
                    total=await self._count(Poll.id),
                    active=await self._count(Poll.id, Poll.is_active == True),  # noqa: E712
                    votes=await self._count(Vote.id),
                ),
            ),
            recent=await self._recent_activity(),
        )

    async def _count(self, column, *conditions) -> int:
        query = select(func.count(column))
        if conditions:
            query = query.where(*conditions)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def _grouped_counts(self, column) -> dict[str, int]:
        result = await self.db.execute(
            select(column, func.count(CertificateSubmission.id)).group_by(column)
        )
        return {str(key): int(count) for key, count in result.all()}

    async def _submission_metrics(self) -> SubmissionMetrics:
        by_title = await self._grouped_counts(CertificateSubmission.title)
        by_semester = await self._grouped_counts(CertificateSubmission.semester)

        return SubmissionMetrics(
            total=await self._count(CertificateSubmission.id),
            pending=await self._count(
                CertificateSubmission.id, CertificateSubmission.status == "pending"
            ),
            by_title=SubmissionTitleCounts(
                enrollment=by_title.get(CertificateTitle.ENROLLMENT.value, 0),
                grades=by_title.get(CertificateTitle.GRADES.value, 0),
            ),
            by_semester=SubmissionSemesterCounts(
                first=by_semester.get(Semester.FIRST.value, 0),
                second=by_semester.get(Semester.SECOND.value, 0),
            ),
        )

    async def _recent_activity(self) -> RecentActivity:
        users = await self.db.execute(
            select(User).order_by(User.created_at.desc()).limit(self.recent_limit)
        )
        submissions = await self.db.execute(
            select(CertificateSubmission)
            .order_by(CertificateSubmission.created_at.desc())
            .limit(self.recent_limit)
        )

        return RecentActivity(
            users=[user_model_to_summary(u) for u in users.scalars().all()],
            submissions=[submission_model_to_recent(s) for s in submissions.scalars().all()],
        )
