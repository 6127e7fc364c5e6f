"""
API Routes Package
"""
from . import health

__all__ = ["health"]
