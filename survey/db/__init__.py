"""Database bootstrap utilities for the survey service.

Exposes engine construction and the SQL migrations runner. Repositories under
`survey/logic/` are the only modules that issue SQL.
"""

from survey.db.base import get_engine
from survey.db.migrations_runner import apply_migrations, default_migrations_dir

__all__ = [
    "get_engine",
    "apply_migrations",
    "default_migrations_dir",
]
