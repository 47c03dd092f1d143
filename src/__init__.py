"""Buddi - chat with an uploaded PDF.

Combines FastAPI for the HTTP relay, Agno for model access,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: Upload and completion relay endpoints
    - agent: Completion clients (server-side agent, HTTP relay)
    - parsing: PDF validation and text extraction
    - chat: Sessions, history persistence, conversation controller
    - ui: Web interface for chat interactions
    - models: Domain records and request/response schemas
"""

__version__ = "0.1.0"
