"""
Authentication module for the dental clinic system.

This module provides:
- The role registry and identity resolver over the per-role tables
- Login, silent token refresh and logout routes
- Bearer token dependencies for protected routes
"""
