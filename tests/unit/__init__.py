"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation and serialization of parts and events
    - provider/: Configuration, model registry, and Agno event mapping
    - api/stream: UI message stream writer and error normalization
    - ui/: Session state machine, message assembly, and labels

Uses mocks for the Agno agent and Gemini model.
"""
