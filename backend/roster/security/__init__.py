# Security package init
"""
Roster Backend — Security Helpers
==================================

    - credentials.py: password records, strength scoring, random secrets
    - tokens.py:      JWT access tokens (python-jose)
"""
