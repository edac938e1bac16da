"""multini-specific exceptions and warnings"""

# ---------- #
# Exceptions
# ---------- #


class EntityNotFound(Exception):
    """Raised when an entity was to be accessed but doesn't exist."""


class SectionNotFound(EntityNotFound, KeyError):
    """Raised when no section is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class InvalidPatternError(ValueError):
    """Raised when a section name pattern is not a valid regular expression."""


# ---------- #
# Warnings
# ---------- #


class IniStructureWarning(Warning):
    """Raised when the ini content can't be handled as requested."""


class SectionNotFoundWarning(IniStructureWarning):
    """Raised when sections were to be printed but none exist under the name."""
