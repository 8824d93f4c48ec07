# AudioWhisper - Speech-to-Text transcription core

"""
Transcription orchestration for recorded audio files.
Routes a recording to OpenAI, Gemini, local Whisper or Parakeet and
returns one cleaned transcript.
"""

__version__ = "0.1.0"
__app_name__ = "AudioWhisper"
