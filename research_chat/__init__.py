"""Research Chat - web research agent with source validation and image analysis.

Combines FastAPI for HTTP streaming, Agno with Gemini for agent orchestration,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - agent: Conversation handles, turn payloads and snapshot streaming
    - attachments: Image validation and base64 encoding
    - chat: Turn orchestration and status tracking
    - sessions: In-memory conversation history
    - ui: Web interface for chat interactions
    - models: Message, attachment and request/response schemas
"""

__version__ = "0.1.0"
