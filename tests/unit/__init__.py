"""Unit tests for individual components in isolation.

Coverage:
    - sessions/: History ordering and removal
    - attachments/: Size limits, encoding and staging
    - agent/: Configuration, handles, payloads and snapshot streaming
    - chat/: Turn status transitions and transcript updates
    - ui/: Markdown and citation rendering

Agno classes are patched out. Leverages pytest-check for multiple
assertions per test.
"""
