"""
Shared utilities for cvsheet.

Common functionality used across contexts:
- Logger setup
- Markdown link handling
- Date helpers
"""

from cvsheet.utils.timestamp import current_year, now, today

__all__ = ["current_year", "now", "today"]
