from __future__ import annotations


class ReaperError(Exception):
    """Base class for every error raised by conn_reaper."""


class ConfigError(ReaperError):
    pass


class PreflightError(ReaperError):
    """The host cannot run the reaper (platform, privileges, missing ss)."""


class SnapshotError(ReaperError):
    """The connection table could not be enumerated for this cycle."""


class EndpointError(ReaperError):
    """A tracked entry carries an endpoint pair that cannot be targeted."""
