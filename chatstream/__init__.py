"""Chatstream - browser chat with a hosted language model.

Combines FastAPI for HTTP streaming, Agno for model access,
NiceGUI for visualization, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and the UI message stream encoder
    - provider: Model registry and streaming generation
    - ui: Web interface, chat session state, and stream client
    - models: Messages, request schema, and stream events
"""

__version__ = "0.1.0"
