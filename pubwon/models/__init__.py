"""SQLAlchemy ORM models — one file per table."""

from pubwon.models.activity import RepositoryActivity
from pubwon.models.blog_post import BlogPost
from pubwon.models.github_issue import GitHubIssue
from pubwon.models.newsletter import Newsletter
from pubwon.models.pain_point import PainPoint
from pubwon.models.repository import Repository
from pubwon.models.subscriber import EmailSubscriber
from pubwon.models.user import User

__all__ = [
    "User",
    "Repository",
    "RepositoryActivity",
    "PainPoint",
    "GitHubIssue",
    "BlogPost",
    "EmailSubscriber",
    "Newsletter",
]
