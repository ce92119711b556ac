"""
Roster Backend — Application Package
=====================================

What: Employee roster, user accounts and text reports over a relational store.

Layout:
    ┌─────────────────────────────────────┐
    │      Routes + Dependencies (HTTP)   │  ← status codes, auth headers
    ├─────────────────────────────────────┤
    │        Services (Business Logic)    │  ← users, employees, reports
    ├─────────────────────────────────────┤
    │   Security (credentials, tokens)    │  ← pure functions, no I/O
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
