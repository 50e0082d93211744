"""
SQL helpers around the script runner: token substitution, bound SQL, generated keys.

Exports: TokenParser, substitute_variables, BoundSQL, assign_generated_keys.
"""

from sqlrunner.engines.sql.bound_sql import BoundSQL
from sqlrunner.engines.sql.keygen import KeyGenerationError, assign_generated_keys
from sqlrunner.engines.sql.token_parser import TokenParser, substitute_variables

__all__ = [
    "TokenParser",
    "substitute_variables",
    "BoundSQL",
    "assign_generated_keys",
    "KeyGenerationError",
]
