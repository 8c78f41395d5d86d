from cupmanager.storage.backends import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from cupmanager.storage.codec import decode_state, encode_state
from cupmanager.storage.repository import (
    KeyValueTournamentRepository,
    TournamentRepository,
)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "TournamentRepository",
    "KeyValueTournamentRepository",
    "encode_state",
    "decode_state",
]
