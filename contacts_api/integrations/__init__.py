"""
Third-party integrations (gravatar, Sentry).
"""
