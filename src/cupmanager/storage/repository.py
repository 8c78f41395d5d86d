"""Tournament and roster persistence.

The engine only talks to :class:`TournamentRepository`. The bundled
implementation keeps the whole application state in one namespaced entry of
a :class:`~cupmanager.storage.backends.KeyValueStore`; every save rewrites the
entry (last write wins).
"""

# Cup Manager
# Copyright (C) 2025  Cup Manager developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, TypeVar

from cupmanager.constants import STORAGE_KEY
from cupmanager.exceptions import FileLoadException
from cupmanager.models import Participant, Tournament
from cupmanager.utils import setup_logger, utc_now

from .backends import KeyValueStore
from .codec import decode_state, encode_state

logger = setup_logger(__name__)

T = TypeVar("T")


class TournamentRepository(ABC):
    """Storage interface required by the controllers."""

    @abstractmethod
    def load_roster(self) -> List[Participant]:
        """All roster participants."""

    @abstractmethod
    def save_participant(self, participant: Participant) -> None:
        """Insert or replace a participant (matched by id)."""

    @abstractmethod
    def delete_participant(self, participant_id: str) -> None:
        """Remove a participant; unknown ids are ignored."""

    @abstractmethod
    def load_tournaments(self) -> List[Tournament]:
        """All stored tournaments."""

    @abstractmethod
    def save_tournament(self, tournament: Tournament) -> None:
        """Insert or replace a tournament (matched by id)."""

    @abstractmethod
    def delete_tournament(self, tournament_id: str) -> None:
        """Remove a tournament and clear the active pointer if it referenced it."""

    @abstractmethod
    def get_active_tournament(self) -> Optional[Tournament]:
        """The tournament currently selected, if any."""

    @abstractmethod
    def set_active_tournament(self, tournament: Optional[Tournament]) -> None:
        """Select a tournament, or clear the selection with None."""


class KeyValueTournamentRepository(TournamentRepository):
    """Repository storing the full state as one JSON document.

    Stored layout::

        {
            "players": {"players": [...]},
            "tournaments": {"tournaments": [...], "active_tournament_id": "..."},
            "last_updated": "2025-01-01T12:00:00+00:00"
        }
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    # ========== State document ==========

    @staticmethod
    def _default_state() -> Dict[str, Any]:
        return {
            "players": {"players": []},
            "tournaments": {"tournaments": [], "active_tournament_id": None},
            "last_updated": utc_now(),
        }

    def _read(self) -> Dict[str, Any]:
        raw = self.store.get(self.key)
        if raw is None:
            return self._default_state()
        state = decode_state(raw)
        self._check_layout(state)
        return state

    @staticmethod
    def _check_layout(state: Dict[str, Any]) -> None:
        players = state.get("players")
        tournaments = state.get("tournaments")
        if not isinstance(players, dict) or not isinstance(
            players.get("players"), list
        ):
            raise FileLoadException("Stored data has no player list")
        if not isinstance(tournaments, dict) or not isinstance(
            tournaments.get("tournaments"), list
        ):
            raise FileLoadException("Stored data has no tournament list")

    def _write(self, state: Dict[str, Any]) -> None:
        state["last_updated"] = utc_now()
        self.store.set(self.key, encode_state(state))

    @staticmethod
    def _parse(items: List[Dict[str, Any]], factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        try:
            return [factory(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise FileLoadException(f"Stored record is malformed: {e}") from e

    @staticmethod
    def _upsert(items: List[Dict[str, Any]], record: Dict[str, Any]) -> None:
        for index, existing in enumerate(items):
            if existing.get("id") == record["id"]:
                items[index] = record
                return
        items.append(record)

    # ========== Roster ==========

    def load_roster(self) -> List[Participant]:
        return self._parse(self._read()["players"]["players"], Participant.from_dict)

    def save_participant(self, participant: Participant) -> None:
        state = self._read()
        self._upsert(state["players"]["players"], participant.to_dict())
        self._write(state)

    def delete_participant(self, participant_id: str) -> None:
        state = self._read()
        state["players"]["players"] = [
            p for p in state["players"]["players"] if p.get("id") != participant_id
        ]
        self._write(state)

    # ========== Tournaments ==========

    def load_tournaments(self) -> List[Tournament]:
        return self._parse(
            self._read()["tournaments"]["tournaments"], Tournament.from_dict
        )

    def save_tournament(self, tournament: Tournament) -> None:
        state = self._read()
        self._upsert(state["tournaments"]["tournaments"], tournament.to_dict())
        self._write(state)

    def delete_tournament(self, tournament_id: str) -> None:
        state = self._read()
        section = state["tournaments"]
        section["tournaments"] = [
            t for t in section["tournaments"] if t.get("id") != tournament_id
        ]
        if section.get("active_tournament_id") == tournament_id:
            section["active_tournament_id"] = None
            logger.info("Deleted tournament was active; active tournament cleared")
        self._write(state)

    def get_active_tournament(self) -> Optional[Tournament]:
        section = self._read()["tournaments"]
        active_id = section.get("active_tournament_id")
        if active_id is None:
            return None
        for record in section["tournaments"]:
            if record.get("id") == active_id:
                return self._parse([record], Tournament.from_dict)[0]
        logger.warning(f"Active tournament {active_id} is not stored; ignoring it")
        return None

    def set_active_tournament(self, tournament: Optional[Tournament]) -> None:
        state = self._read()
        section = state["tournaments"]
        if tournament is None:
            section["active_tournament_id"] = None
        else:
            self._upsert(section["tournaments"], tournament.to_dict())
            section["active_tournament_id"] = tournament.id
        self._write(state)

    # ========== Backup ==========

    def export_data(self) -> str:
        """Whole stored state as indented JSON, for backups."""
        return encode_state(self._read(), indent=2)

    def import_data(self, text: str) -> None:
        """Replace the stored state with a previous export.

        Raises:
            FileLoadException: If the text is not a valid export
        """
        state = decode_state(text)
        self._check_layout(state)
        self._parse(state["players"]["players"], Participant.from_dict)
        self._parse(state["tournaments"]["tournaments"], Tournament.from_dict)
        state["tournaments"].setdefault("active_tournament_id", None)
        self._write(state)
        logger.info("Imported stored state from backup")

    def clear_all(self) -> None:
        """Forget everything stored under this repository's key."""
        self.store.delete(self.key)
