"""
FastAPI REST API Layer for tts-proxy.

    - routes.py: session, text-to-speech, metadata and health endpoints
    - schemas.py: Pydantic response models
    - dependencies.py: app.state providers for Depends()
"""
