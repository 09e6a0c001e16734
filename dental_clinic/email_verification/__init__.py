"""
Email verification codes and routes.
"""
