"""Voice Finder: conversational shortlists from the ElevenLabs voice library."""

__version__ = "0.3.0"
