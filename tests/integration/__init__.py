"""Integration tests for components working together as a system.

Coverage:
    - Session endpoints with real HTTP requests
    - Image upload validation
    - SSE chat streaming through the controller and snapshot reducer
    - Live Gemini turn (when a key is configured)
"""
