"""Audio resource handling.

This package owns the lifecycle of published, player-consumable audio files.
"""

from .resources import AudioResourceManager, audio_extension

__all__ = ["AudioResourceManager", "audio_extension"]
