"""Storage and query services behind the API routers."""

from natours.services.query import QueryFeatures
from natours.services.repository import InMemoryRepository, Repositories, Repository

__all__ = [
    "InMemoryRepository",
    "QueryFeatures",
    "Repositories",
    "Repository",
]
