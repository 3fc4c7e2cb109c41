"""ToGather account flow: registration, sign-in placeholder and dashboard."""

__version__ = "0.1.0"
