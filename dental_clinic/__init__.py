"""
Dental clinic identity and session backend.
"""
