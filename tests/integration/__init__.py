"""Integration tests for components working together.

Coverage:
    - API endpoints with real HTTP requests over ASGITransport
    - Controller -> relay client -> FastAPI relay -> completion client
    - Live model answers (only when an API key is configured)
"""
