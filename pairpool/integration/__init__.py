"""
Integration layer: the token collaborator contract and the in-memory
reference token used by tests and the offline demo.
"""

from .token_ledger import Checkpointable, ConnectedToken, InMemoryToken, TokenCheckpoint, TokenCollaborator

__all__ = [
    "Checkpointable",
    "ConnectedToken",
    "InMemoryToken",
    "TokenCheckpoint",
    "TokenCollaborator",
]
