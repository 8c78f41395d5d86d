"""A tournament participant."""

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

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from cupmanager.utils import parse_datetime, utc_now


@dataclass(frozen=True)
class Participant:
    """
    A roster entry that can be entered into tournaments.

    Participants are immutable values. The only supported edit is a rename,
    which produces a new value with the same ``id``; tournaments keep the
    snapshot taken when they were created.

    Attributes
    ----------
    id : str
        Stable unique identifier.
    name : str
        Display name, unique in the roster ignoring case.
    avatar : str or None
        Optional reference to an avatar image.
    created_at : datetime
        When the participant was added to the roster.

    Examples
    --------
    Creating and renaming a participant::

        nacho = Participant.create("Nacho")
        renamed = nacho.renamed("Ignacio")
        assert renamed.id == nacho.id
    """

    id: str
    name: str
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, avatar: Optional[str] = None) -> "Participant":
        """Build a participant with a fresh identifier."""
        return cls(id=str(uuid.uuid4()), name=name, avatar=avatar)

    def renamed(self, name: str) -> "Participant":
        """Return a copy carrying a new name."""
        return replace(self, name=name)

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            avatar=data.get("avatar"),
            created_at=parse_datetime(data.get("created_at")) or utc_now(),
        )
