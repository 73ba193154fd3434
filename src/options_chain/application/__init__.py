"""
Application layer: configuration and chain processing use cases.
"""
