"""
Property Manager API: accounts, password reset and property setup over FastAPI.
"""

__version__ = "1.0.0"
