# errors.py
# Exception types raised by dxf-cutpath. Per-entity problems never raise; they are
# logged and the entity is skipped.


class CutpathError(Exception):
    """Base class for dxf-cutpath errors."""


class DXFLoadError(CutpathError):
    """The DXF parser could not produce an entity sequence."""

    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load DXF from {source}: {reason}")


class ConfigurationError(CutpathError):
    """A measurement or tessellation setting is invalid."""


class InvalidEntityError(CutpathError):
    """A raw entity record does not satisfy its variant's required fields."""
