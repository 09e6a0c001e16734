"""
Shared security and middleware utilities.
"""
