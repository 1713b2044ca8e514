"""Repository modules for database access."""

from repositories.poll_repository import PollRepository
from repositories.user_repository import UserRepository
from repositories.vote_repository import VoteRepository

__all__ = [
    "PollRepository",
    "VoteRepository",
    "UserRepository",
]
