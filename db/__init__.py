from db.database import get_engine, get_session, init_db
from db.models import Article, MediaFile

__all__ = ["get_engine", "get_session", "init_db", "Article", "MediaFile"]
