"""Text-to-speech provider client.

This package contains the HTTP client used by the pipeline synthesis stage.
"""

from .speech_client import DEFAULT_SPEECH_ENDPOINT, SpeechSynthesisClient, SpeechSynthesizer

__all__ = ["DEFAULT_SPEECH_ENDPOINT", "SpeechSynthesisClient", "SpeechSynthesizer"]
