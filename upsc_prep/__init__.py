"""
UPSC Prep API - backend for daily practice, answer writing, mock tests and study planning
"""

__version__ = "1.0.0"
