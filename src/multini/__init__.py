from .interface import IniFile, Section, parse, read_stream
from .args import Parameters
from .entities import Option, SectionName
from .exceptions_warnings import (
    EntityNotFound,
    SectionNotFound,
    InvalidPatternError,
    IniStructureWarning,
    SectionNotFoundWarning,
)
from .globals import VALID_MARKERS, GLOBAL_SECTION_NAME

__version__ = "0.1.0"
