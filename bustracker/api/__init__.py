"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from bustracker.api import app

    uvicorn bustracker.api:app --reload
"""

from bustracker.api.app import app

__all__ = ["app"]
