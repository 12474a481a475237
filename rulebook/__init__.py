"""
Rulebook - Rule Versioning

Version history, diffing and rollback for coding-guideline rule documents.
"""

__version__ = "0.1.0"

# Configuration is available at top level for convenience
from rulebook.config import config

__all__ = ["config", "__version__"]
