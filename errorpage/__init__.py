"""
errorpage — fallback error rendering for HTTP applications.

Application package root.

Layers:
    - domain: Failure chain model and content negotiation. No framework imports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (error rendering, logging).
    - core: Configuration.
"""
