"""Database models module."""

from models.user import User, UserRole
from models.mp import MP
from models.poll import Poll, PollOption
from models.vote import Vote
from models.certificate import CertificateSubmission, CertificateTitle, Semester

__all__ = [
    "User",
    "UserRole",
    "MP",
    "Poll",
    "PollOption",
    "Vote",
    "CertificateSubmission",
    "CertificateTitle",
    "Semester",
]
