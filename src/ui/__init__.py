"""NiceGUI interface - presentation layer for the chat.

Responsibilities:
    - PDF upload control with inline validation errors
    - Chat message display with a typing indicator
    - Chat statistics and saved-session history with a date filter

Conversation logic lives in src.chat; document extraction and model
requests go through the API.
"""
