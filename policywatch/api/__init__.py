"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from policywatch.api import app

    uvicorn policywatch.api:app --reload
"""

from policywatch.api.app import app, create_app

__all__ = ["app", "create_app"]
