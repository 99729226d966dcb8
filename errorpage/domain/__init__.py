"""
Domain layer.

Failure chain snapshots and content negotiation.
Pure Python, no framework imports.
"""
