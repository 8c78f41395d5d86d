"""Shared error reporting for the engine-facing controllers."""

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

from typing import Callable, Optional, TypeVar

from cupmanager.exceptions import CupManagerException
from cupmanager.utils import setup_logger

T = TypeVar("T")


class ErrorReportingController:
    """Base for controllers that turn engine exceptions into an error message.

    Failed operations log the exception, store its message in :attr:`error`
    (the most recent failure wins) and return None. Exceptions that are not
    :class:`CupManagerException` subclasses are programming errors and
    propagate.
    """

    def __init__(self) -> None:
        self._error: Optional[str] = None

    @property
    def error(self) -> Optional[str]:
        """Message of the last failed operation, or None."""
        return self._error

    def clear_error(self) -> None:
        self._error = None

    def _attempt(self, action: str, operation: Callable[[], T]) -> Optional[T]:
        try:
            return operation()
        except CupManagerException as e:
            logger = setup_logger(type(self).__module__)
            logger.error(f"Failed to {action}: {e}")
            self._error = str(e)
            return None
