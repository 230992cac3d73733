# ExamFlex package
"""
ExamFlex - exam result and merit engine
"""

__version__ = "1.0.0"

from .config import settings

__all__ = [
    "settings",
    "__version__",
]
