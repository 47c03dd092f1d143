"""FastAPI endpoints for Buddi.

Server half of the application: holds the model credential and does the
work the browser page should not do itself.

Endpoints:
    - GET /health: Service health status
    - POST /upload/pdf: Validate a PDF and return its text
    - POST /chat/completions: Relay a question to the language model
"""
