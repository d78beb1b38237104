"""
Application layer: ports and the authentication workflow.
"""
