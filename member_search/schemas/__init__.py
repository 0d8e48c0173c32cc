"""
Public Pydantic schemas used by routes, services, repositories and tests.

Includes the search condition, the projected member/team row, and the paging
models (PageRequest, Page, PageMetadata).
"""

from .common import MessageResponse, Page, PageMetadata, PageRequest, SortOrder  # noqa: F401
from .member import MemberSearchCondition, MemberTeamRead  # noqa: F401
