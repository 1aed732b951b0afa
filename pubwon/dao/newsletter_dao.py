"""NewsletterDAO — newsletters table operations."""

from pubwon.dao.base import BaseDAO
from pubwon.models.newsletter import Newsletter


class NewsletterDAO(BaseDAO[Newsletter]):
    model = Newsletter
