"""Core module for the leaguebracket application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
