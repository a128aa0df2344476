"""Core data types for the leaguebracket application."""

from typing import TypedDict


class FirestoreDocument(TypedDict):
    """Generic Firestore document structure."""

    id: str
