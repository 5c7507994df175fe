"""
Core Infrastructure for tts-proxy.

This package provides foundational components:
    - config.py: AppConfig loading and validation
    - logging/: Structured logging with numeric levels
"""
