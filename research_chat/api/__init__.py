"""FastAPI endpoints for the research chat.

Endpoints:
    - GET /health: Service health status
    - POST /sessions: Start a session with the greeting
    - GET /sessions/{id}: Stored session history
    - DELETE /sessions/{id}: Reset a session
    - POST /upload/image: Validate and encode an image attachment
    - POST /chat/stream: Run a turn, streamed as Server-Sent Events
"""

from research_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
