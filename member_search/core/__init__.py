"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request correlation ids
- The error taxonomy shared by repositories and the API layer
"""
