"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat transcript display with incremental streaming updates
    - Settings sidebar (system prompt, temperature, max tokens, model)
    - Ready / not-ready session state gating submission
    - Stream client for the chat endpoint

Contains minimal business logic. Delegates generation to the API.
"""
