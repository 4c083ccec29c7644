"""
Authentication module for the health profile service.

This module provides the session provider:
- Sign-up and sign-in with email and password
- JWT session tokens (bearer header or cookie)
- Auth change subscriptions and sign-out
"""
