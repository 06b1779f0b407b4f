"""CyberPulse - offline-first sync backend for cybersecurity intelligence."""

__version__ = "0.1.0"
