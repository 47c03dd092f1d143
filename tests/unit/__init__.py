"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Upload validation and text extraction
    - agent/: Configuration, agno wiring, relay client error mapping
    - chat/: Topic labels, session building, persistence, transitions

Fake completion clients stand in for the network.
"""
