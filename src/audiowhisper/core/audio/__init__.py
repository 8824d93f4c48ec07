from .validator import AudioFileValidator

__all__ = ["AudioFileValidator"]
