"""Exception types raised while booting a hopper session.

Fatal errors (bad level document, no playable level, missing sprite frames)
propagate to the engine, which shows an error screen instead of starting the
frame loop. ``LayerSpecError`` never leaves the asset registry: a broken
optional layer is simply treated as absent.
"""


class HopperError(Exception):
    """Base class for all universe-hopper errors."""


class LevelConfigError(HopperError, ValueError):
    """Level document is missing, malformed, or has no levels."""


class NoPlayableLevelsError(HopperError, RuntimeError):
    """No level survived background validation."""


class SpriteLoadError(HopperError, RuntimeError):
    """A required sprite animation has no loadable frames."""


class LayerSpecError(HopperError, ValueError):
    """An optional layer spec is misconfigured.

    Attributes:
        cause: Short cause key used for warn-once deduplication
            (e.g. ``"unsupportedType"``, ``"missingFolder"``).
    """

    def __init__(self, cause: str, message: str):
        super().__init__(message)
        self.cause = cause
