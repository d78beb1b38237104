"""
HTTP adapter for the auth core.
"""
