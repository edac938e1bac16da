"""Ini entities are either a section name or an option."""

from typing import Self
from dataclasses import dataclass
from .globals import VALID_MARKERS, SECTION_NAME_BRACKETS


@dataclass(slots=True)
class Option:
    """A key and the value it holds. An empty value means the key stands alone
    (e.g. a kept comment line).

    Args:
        key (str): The option key.
        value (str): The option value. Defaults to "".
    """

    key: str
    value: str = ""

    def to_string(self, delimiter: VALID_MARKERS) -> str:
        """Convert the Option into an ini line (without line break).

        Args:
            delimiter (VALID_MARKERS): The delimiter to use for separating option key
                and value.

        Returns:
            str: The ini string.
        """
        return f"{self.key} {delimiter} {self.value}" if self.value else self.key

    @classmethod
    def from_string(
        cls,
        string: str,
        delimiter: VALID_MARKERS | tuple[VALID_MARKERS, ...],
    ) -> Self:
        """Create an Option from a string.

        The string is split on the first occurrence of the first delimiter it
        contains (delimiters are tried in the given order). Without any delimiter,
        the whole string is the key. Spaces around key and value are removed.

        Args:
            string (str): The string that contains the option key and value.
            delimiter (VALID_MARKERS | tuple[VALID_MARKERS, ...]): One or more
                delimiters that can separate option key and value.

        Returns:
            Self: A new option with the extracted key and value.
        """
        if not isinstance(delimiter, tuple):
            delimiter = (delimiter,)
        for deli in delimiter:
            key, found, value = string.partition(deli)
            if found:
                return cls(key=key.strip(" "), value=value.strip(" "))
        return cls(key=string.strip(" "))


class SectionName(str):
    """A configuration section's name."""

    def __new__(cls, name_with_brackets: str) -> Self:
        """
        Args:
            name_with_brackets (str): A section header line, e.g. "[name]". Spaces and
                brackets are removed from both ends.
        """
        return super().__new__(cls, name_with_brackets.strip(SECTION_NAME_BRACKETS))

    @staticmethod
    def is_header(line: str) -> bool:
        """Check whether a line is a section header (starts with "[")."""
        return line.startswith("[")
