from shared.models.user import CurrentUser
from shared.models.pagination import PageRequest, Pagination

__all__ = ["CurrentUser", "PageRequest", "Pagination"]
