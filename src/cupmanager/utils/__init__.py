"""Shared helpers for Cup Manager."""

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

import logging
import os
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil.parser import isoparse

from cupmanager.constants import ENV_LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_root_configured = False


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the package root logger once.

    The level comes from the ``CUPMANAGER_LOG_LEVEL`` environment variable
    (default ``INFO``). Handlers are attached to the ``cupmanager`` logger only,
    so applications embedding the engine keep control of the root logger.

    Args:
        name: Logger name, normally ``__name__``

    Returns:
        The configured logger
    """
    global _root_configured
    if not _root_configured:
        package_logger = logging.getLogger("cupmanager")
        level_name = os.environ.get(ENV_LOG_LEVEL, "INFO").upper()
        package_logger.setLevel(getattr(logging, level_name, logging.INFO))
        if not package_logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            package_logger.addHandler(handler)
        _root_configured = True
    return logging.getLogger(name)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Union[datetime, str, None]) -> Optional[datetime]:
    """Coerce a stored timestamp back into a ``datetime``.

    Accepts ``datetime`` objects unchanged and ISO-8601 strings (including a
    trailing ``Z``). ``None`` passes through.
    """
    if value is None or isinstance(value, datetime):
        return value
    return isoparse(value)


__all__ = ["setup_logger", "utc_now", "parse_datetime"]
