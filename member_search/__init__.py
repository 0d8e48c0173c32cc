"""Dynamic member/team search over SQLAlchemy with paged retrieval and bulk updates."""

__version__ = "0.1.0"
