"""
HireHub profile assets
Consistency engine for a candidate's CVs, profile photos and portfolio projects.

Architecture:
- PostgreSQL: Accounts (identity source of truth)
- MongoDB: Profile aggregates (one document per account)
- Object store: the uploaded bytes, addressed by storage key
"""

__version__ = "1.0.0"
