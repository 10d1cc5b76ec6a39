"""Infrastructure layer — operational concerns for the hum transcription service.

Modules:
    metrics     Prometheus metrics registry.
"""
