"""Test package for Buddi.

Structure:
    - unit/: Parser, completion clients, session builder, history store,
      state transitions and controller
    - integration/: FastAPI endpoints and the controller driven through
      the relay

PDFs are generated on the fly by the pdf_factory fixture. Leverages pytest
with pytest-check for soft assertions.
"""
