"""Runtime configuration and controller wiring."""

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

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cupmanager.constants import (
    APP_DIR_NAME,
    DEFAULT_TIEBREAK_ORDER,
    ENV_DATA_DIR,
    ENV_SEED,
    STORAGE_KEY,
    TIEBREAK_NAMES,
)
from cupmanager.controllers import RosterController, TournamentController
from cupmanager.controllers.tournament import (
    MatchGenerator,
    ProgressionEngine,
    ResultRecorder,
    StandingsCalculator,
)
from cupmanager.exceptions import InvalidConfigurationException
from cupmanager.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    KeyValueTournamentRepository,
)
from cupmanager.utils import setup_logger

logger = setup_logger(__name__)


def get_default_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the default directory for stored data.

    On Windows this points into the user's application data directory,
    elsewhere into ``$XDG_DATA_HOME`` (``~/.local/share`` if unset).
    """
    environ = os.environ if environ is None else environ
    if os.name == "nt":
        base_dir = environ.get("APPDATA") or environ.get("LOCALAPPDATA")
        if base_dir:
            data_dir = Path(base_dir)
        else:
            data_dir = Path.home() / "AppData" / "Roaming"
    else:
        data_dir = Path(environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return data_dir / APP_DIR_NAME


@dataclass
class ManagerConfig:
    """Settings for a Cup Manager instance.

    Attributes:
        storage_dir: Directory for the JSON state file; None keeps state in
            memory only
        storage_key: Namespace of the stored state
        seed: Seed for schedule shuffling; None for a fresh random draw
        tiebreak_order: Tiebreakers applied after points, in order
    """

    storage_dir: Optional[Path] = None
    storage_key: str = STORAGE_KEY
    seed: Optional[int] = None
    tiebreak_order: List[str] = field(
        default_factory=lambda: list(DEFAULT_TIEBREAK_ORDER)
    )

    def __post_init__(self) -> None:
        if self.storage_dir is not None:
            self.storage_dir = Path(self.storage_dir)
        if not self.storage_key:
            raise InvalidConfigurationException("Storage key cannot be empty")
        unknown = [key for key in self.tiebreak_order if key not in TIEBREAK_NAMES]
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown tiebreakers: {', '.join(unknown)}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ManagerConfig":
        """Build a configuration from ``CUPMANAGER_*`` environment variables.

        ``CUPMANAGER_DATA_DIR`` overrides the platform data directory and
        ``CUPMANAGER_SEED`` fixes the schedule seed.

        Raises:
            InvalidConfigurationException: If the seed is not an integer
        """
        environ = os.environ if environ is None else environ
        data_dir = environ.get(ENV_DATA_DIR)
        storage_dir = Path(data_dir) if data_dir else get_default_data_dir(environ)

        seed: Optional[int] = None
        raw_seed = environ.get(ENV_SEED)
        if raw_seed:
            try:
                seed = int(raw_seed)
            except ValueError as e:
                raise InvalidConfigurationException(
                    f"{ENV_SEED} must be an integer, got {raw_seed!r}"
                ) from e

        return cls(storage_dir=storage_dir, seed=seed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "storage_dir": str(self.storage_dir) if self.storage_dir else None,
            "storage_key": self.storage_key,
            "seed": self.seed,
            "tiebreak_order": list(self.tiebreak_order),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerConfig":
        storage_dir = data.get("storage_dir")
        return cls(
            storage_dir=Path(storage_dir) if storage_dir else None,
            storage_key=data.get("storage_key", STORAGE_KEY),
            seed=data.get("seed"),
            tiebreak_order=list(data.get("tiebreak_order", DEFAULT_TIEBREAK_ORDER)),
        )

    def build_store(self) -> KeyValueStore:
        if self.storage_dir is None:
            return InMemoryKeyValueStore()
        return JsonFileKeyValueStore(self.storage_dir)


def build_controllers(
    config: Optional[ManagerConfig] = None,
) -> Tuple[RosterController, TournamentController]:
    """Wire a repository, the engine components and both controllers.

    Args:
        config: Settings to use; read from the environment if None

    Returns:
        Tuple of (roster controller, tournament controller), both loaded
    """
    config = config or ManagerConfig.from_env()
    repository = KeyValueTournamentRepository(config.build_store(), config.storage_key)
    standings_calculator = StandingsCalculator(config.tiebreak_order)
    tournaments = TournamentController(
        repository,
        generator=MatchGenerator.seeded(config.seed),
        recorder=ResultRecorder(ProgressionEngine(standings_calculator)),
        standings_calculator=standings_calculator,
    )
    roster = RosterController(repository)
    roster.load()
    tournaments.load()
    logger.debug(f"Controllers ready with {config.to_dict()}")
    return roster, tournaments
