"""
SOW revision diff service.
"""

__version__ = "1.0.0"
