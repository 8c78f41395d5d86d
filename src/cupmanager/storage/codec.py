"""JSON encoding of the stored application state.

Datetimes are written as ISO-8601 strings and revived on read when a string
under a timestamp key matches the ISO pattern.
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

import json
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from cupmanager.exceptions import FileLoadException, FileSaveException
from cupmanager.utils import parse_datetime

ISO_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")

# Keys holding timestamps besides the ``*_at`` convention
EXTRA_DATE_KEYS = frozenset({"last_updated"})


def _is_date_key(key: str) -> bool:
    return key.endswith("_at") or key in EXTRA_DATE_KEYS


def _default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _revive_dates(obj: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in obj.items():
        if isinstance(value, str) and _is_date_key(key) and ISO_DATETIME_PATTERN.match(value):
            try:
                obj[key] = parse_datetime(value)
            except ValueError:
                pass  # looks like a date but is not one; keep the string
    return obj


def encode_state(state: Dict[str, Any], indent: Optional[int] = None) -> str:
    """Serialize state to JSON text.

    Raises:
        FileSaveException: If the state holds values JSON cannot represent
    """
    try:
        return json.dumps(state, default=_default, ensure_ascii=False, indent=indent)
    except (TypeError, ValueError) as e:
        raise FileSaveException(f"Could not serialize state: {e}") from e


def decode_state(text: str) -> Dict[str, Any]:
    """Parse JSON text back into state, reviving timestamps.

    Raises:
        FileLoadException: If the text is not a JSON object
    """
    try:
        data = json.loads(text, object_hook=_revive_dates)
    except json.JSONDecodeError as e:
        raise FileLoadException(f"Stored data is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise FileLoadException("Stored data must be a JSON object")
    return data
