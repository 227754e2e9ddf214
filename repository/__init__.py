from repository.articles import ArticleRepository
from repository.errors import ArticleNotFound, MediaNotFound, RepositoryError, ValidationError
from repository.media import MediaLibrary

__all__ = [
    "ArticleRepository",
    "ArticleNotFound",
    "MediaLibrary",
    "MediaNotFound",
    "RepositoryError",
    "ValidationError",
]
