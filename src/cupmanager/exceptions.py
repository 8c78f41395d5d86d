"""Exceptions for use in Cup Manager"""

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


# ========== Base Application Exception ==========


class CupManagerException(Exception):
    """Base exception for all Cup Manager errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(CupManagerException):
    """Base exception for validation errors."""

    pass


class NameValidationException(ValidationException):
    """Raised when a tournament or participant name is empty or already taken."""

    pass


class ParticipantCountException(ValidationException):
    """Raised when a format is given too few participants."""

    pass


class TournamentAlreadyStartedException(ValidationException):
    """Raised when starting a tournament that already has matches."""

    pass


class InvalidResultException(ValidationException):
    """Raised when a result is invalid (e.g., negative score)."""

    pass


# ========== Not Found Exceptions ==========


class NotFoundException(CupManagerException):
    """Base exception for unknown identifiers."""

    pass


class TournamentNotFoundException(NotFoundException):
    """Raised when a requested tournament does not exist."""

    pass


class MatchNotFoundException(NotFoundException):
    """Raised when a requested match does not exist."""

    pass


class ParticipantNotFoundException(NotFoundException):
    """Raised when a requested participant cannot be found."""

    pass


# ========== State Exceptions ==========


class InvalidStateException(CupManagerException):
    """Base exception for operations not allowed in the current state."""

    pass


class MatchStateException(InvalidStateException):
    """Raised when a match cannot take the requested result operation."""

    pass


class TournamentStateException(InvalidStateException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


# ========== Storage Exceptions ==========


class StorageException(CupManagerException):
    """Base exception for persistence errors."""

    pass


class FileLoadException(StorageException):
    """Raised when stored state cannot be read or decoded."""

    pass


class FileSaveException(StorageException):
    """Raised when state cannot be encoded or written."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(CupManagerException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
