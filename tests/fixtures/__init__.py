"""
GrantFit Test Fixtures Package
Reusable factories for building companies, grants, rules and matches.
"""

from .factories import *
