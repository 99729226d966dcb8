"""
Shared module package.

Contains cross-cutting concerns:
- Error rendering and the fallback error handler
- Logging configuration
"""
