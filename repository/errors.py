"""Errors raised by the persistence layer."""


class RepositoryError(Exception):
    """Storage or transport failure. Safe to retry."""


class ValidationError(RepositoryError):
    """Input rejected before it reached the database."""


class ArticleNotFound(RepositoryError):
    def __init__(self, article_id: str) -> None:
        super().__init__(f"Article {article_id} not found")
        self.article_id = article_id


class MediaNotFound(RepositoryError):
    def __init__(self, media_id: str) -> None:
        super().__init__(f"Media file {media_id} not found")
        self.media_id = media_id
