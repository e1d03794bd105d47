"""Test package for Research Chat.

Unit tests for isolated logic and integration tests for HTTP workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: API tests through the real FastAPI app

The Gemini provider is replaced by a scripted runner except in tests marked
requires_api_key. Leverages pytest with pytest-check for soft assertions.
"""
