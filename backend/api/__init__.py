"""
GrantFit API Routers
FastAPI router modules for eligibility matching.
"""
from backend.api import documents, eligibility, health, matches, profile

__all__ = [
    "documents",
    "eligibility",
    "health",
    "matches",
    "profile",
]
