"""
Shared error handling package.

Renders unhandled failures as JSON, XML or HTML responses and writes
the full failure chain to the operational log when details are hidden.
"""
