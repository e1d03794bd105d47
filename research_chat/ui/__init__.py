"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Transcript display with streaming updates and citation lists
    - Image attachment staging with size validation
    - Session reset

Delegates all turn logic to the conversation controller.
"""
