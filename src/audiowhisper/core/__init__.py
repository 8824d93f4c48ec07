# Core module - Business logic

"""
Core functionality for the transcription service.
Contains settings, backend adapters, the transcription orchestrator and
the transcript post-processing steps.
"""
