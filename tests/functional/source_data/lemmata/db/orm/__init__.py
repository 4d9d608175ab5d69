"""Organisation session wrapper: every query runs in its own org-scoped transaction."""

from lemmata.db.orm.session import AsyncSession, Query, Session, get_session

__all__ = ["AsyncSession", "Query", "Session", "get_session"]
