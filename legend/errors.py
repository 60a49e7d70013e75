"""
Error Types
===========
Exceptions raised by the metadata layer.

Most lookups degrade gracefully and never raise. The classes here cover the
few fail-fast paths: malformed payloads, missing required singleton assets,
unregistered triggers and bad configuration.
"""


class LegendError(Exception):
    """Base class for every error raised by this package."""


class MetadataError(LegendError, ValueError):
    """The session metadata payload (or a registry) could not be validated."""


class MissingAssetError(MetadataError):
    """A required singleton asset (land, slot, passive) is absent."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"MetadataRegistry requires metadata.assets.{key} "
            "(metadata.assets.land, metadata.assets.slot and "
            "metadata.assets.passive must all be provided)."
        )


class MissingTriggerError(LegendError, KeyError):
    """A trigger id has no registered descriptor."""

    def __init__(self, trigger_id: str, message: str):
        self.trigger_id = trigger_id
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.message

    @classmethod
    def missing_label(cls, trigger_id: str) -> "MissingTriggerError":
        return cls(trigger_id, f'Trigger "{trigger_id}" is missing a label')

    @classmethod
    def not_in_assets(cls, trigger_id: str) -> "MissingTriggerError":
        return cls(trigger_id, f'Trigger "{trigger_id}" not found in assets')


class ConfigError(LegendError, ValueError):
    """An environment setting holds an unusable value."""
