"""
HTTP API: app factory and shared dependencies.
"""
