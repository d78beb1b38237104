"""
Domain layer: entities, events and exceptions for principals and sessions.
"""
