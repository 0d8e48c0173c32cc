"""
API route modules.

This package contains subrouters for:
- Members: search, paged search, entity paging, create, team changes, bulk updates
- Teams: create, list, per-team statistics

Routers are included from member_search.api.main (under the /api/v1 prefix).
"""
