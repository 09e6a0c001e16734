"""
Password reset by security questions.
"""
