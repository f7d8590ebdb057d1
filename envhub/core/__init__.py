"""Core — models, persistence, services and the launch engine."""
