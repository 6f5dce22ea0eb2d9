"""Errors raised while generating request scaffolding.

None of these is fatal to the embedding editor: the generation action
catches them and skips the generation.
"""


class GenerationError(Exception):
    """Base class for generation errors."""


class ResolutionMiss(GenerationError):
    """The endpoint method or a referenced type could not be resolved."""


class NotWritable(GenerationError):
    """The target document is read-only."""


class CatalogError(GenerationError):
    """The endpoint catalog file is malformed."""


class ConfigError(GenerationError):
    """The generator config file is malformed."""
