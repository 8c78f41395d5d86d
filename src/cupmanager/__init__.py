"""Cup Manager: league, knockout and group + knockout tournament engine."""

__version__ = "1.0.0"
