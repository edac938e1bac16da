"""Interface classes exist for coder interaction: an IniFile holds the sections of
a configuration file, a Section holds the options of one section block."""

from typing import Iterable, Iterator, TextIO, TypeAlias
import os
import re
import logging
import warnings
from pathlib import Path
from charset_normalizer import from_bytes as read_from_bytes
from .exceptions_warnings import (
    SectionNotFound,
    SectionNotFoundWarning,
    InvalidPatternError,
)
from .entities import Option, SectionName
from .args import Parameters
from .utils import ReadWriteLock, copy_doc

logger = logging.getLogger(__name__)

SectionPattern: TypeAlias = str | re.Pattern[str]
"""Regular expression (or its string) that section names are searched with."""


class Section:
    """A configuration section block. Holds options in the order they were first
    added. Sections are created by IniFile.add_section, not directly.

    All methods are thread-safe; each section guards its options with its own
    reader/writer lock.
    """

    def __init__(self, name: str, parameters: Parameters) -> None:
        """
        Args:
            name (str): Name of the section.
            parameters (Parameters): Parameters of the IniFile the section belongs to.
        """
        self._name = name
        self._parameters = parameters
        self._options: dict[str, str] = {}
        self._option_names: list[str] = []
        self._lock = ReadWriteLock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_global(self) -> bool:
        """Whether this is the implicit section before the first header."""
        return self._name == self._parameters.global_section_name

    def exists(self, option: str) -> bool:
        """Check whether an option exists.

        Args:
            option (str): The option key.

        Returns:
            bool: True if the option has a value in this section (even if it was only
                set with set_value_for).
        """
        with self._lock.read():
            return option in self._options

    @copy_doc(exists)
    def __contains__(self, option: str) -> bool:
        return self.exists(option)

    def value_of(self, option: str) -> str:
        """Get the value of an option. An empty string if the option doesn't exist."""
        with self._lock.read():
            return self._options.get(option, "")

    def set_value_for(self, option: str, value: str) -> str:
        """Set the value of an option without touching the option order. A new option
        set this way is not listed in option_names and thus not written.

        Args:
            option (str): The option key.
            value (str): The new value.

        Returns:
            str: The old value or an empty string if the option didn't exist.
        """
        with self._lock.write():
            old_value = self._options.get(option, "")
            self._options[option] = value
            return old_value

    def add(self, option: str, value: str) -> str:
        """Add an option. Adding an existing option overwrites its value but keeps
        its position. An option that already has a value (also one given by
        set_value_for) is not added to option_names again.

        Args:
            option (str): The option key.
            value (str): The option value.

        Returns:
            str: The old value or an empty string if the option is new.
        """
        with self._lock.write():
            return self._add(option, value)

    def _add(self, option: str, value: str) -> str:
        # caller holds the write lock
        if option not in self._options:
            self._option_names.append(option)
        old_value = self._options.get(option, "")
        self._options[option] = value
        return old_value

    def delete(self, option: str) -> str:
        """Delete an option.

        Args:
            option (str): The option key.

        Returns:
            str: The deleted value or an empty string if the option didn't exist.
        """
        with self._lock.write():
            value = self._options.pop(option, "")
            if option in self._option_names:
                self._option_names.remove(option)
            return value

    def option_names(self) -> list[str]:
        """Get the option keys in the order they were first added."""
        with self._lock.read():
            return list(self._option_names)

    def options(self) -> dict[str, str]:
        """Get a copy of all options, including those only set with set_value_for."""
        with self._lock.read():
            return dict(self._options)

    def add_option(self, line: str) -> Option | None:
        """Add an option from a raw ini line (see Option.from_string). The option is
        only stored if it has a value, except for comment lines if keep_comments is
        set, which are stored as keys without value.

        Args:
            line (str): The raw line.

        Returns:
            Option | None: The stored option or None if the line was dropped.
        """
        if self._parameters.keep_comments and line.lstrip(" \t").startswith(
            self._parameters.comment_prefixes
        ):
            option = Option(key=line)
        else:
            option = Option.from_string(line, self._parameters.option_delimiters)
            if not option.value:
                logger.debug(
                    "Dropping line %r in section '%s' (no value).", line, self._name
                )
                return None

        with self._lock.write():
            self._add(option.key, option.value)
        return option

    def to_string(self) -> str:
        """Convert the section into an ini string: the header line (none for the
        global section) and one line per option, each terminated by a line break.

        Returns:
            str: The ini string.
        """
        delimiter = self._parameters.option_delimiters[0]
        with self._lock.read():
            lines = [] if self.is_global else [f"[{self._name}]"]
            lines.extend(
                Option(key=key, value=self._options.get(key, "")).to_string(delimiter)
                for key in self._option_names
            )
        return "".join(f"{line}\n" for line in lines)

    @copy_doc(to_string)
    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._name!r}>"


class IniFile:
    """An ini configuration file: its sections in the order their names first
    appeared, where one name may hold several section blocks.

    All methods are thread-safe. The IniFile lock only guards which sections exist,
    each Section guards its own options.
    """

    def __init__(
        self,
        file_path: str | os.PathLike = "",
        parameters: Parameters | None = None,
        **kwargs,
    ) -> None:
        """
        Args:
            file_path (str | os.PathLike, optional): Path of the file this
                configuration belongs to. Defaults to "".
            parameters (Parameters | None, optional): Parameters for reading and
                writing. If None, default Parameters are used. Defaults to None.
            **kwargs (optional): Parameters as kwargs, overriding those of parameters
                (which is not modified). See doc of Parameters for details.
        """
        if parameters is None:
            parameters = Parameters(**kwargs)
        elif kwargs:
            parameters = parameters.copy(**kwargs)
        self.parameters = parameters
        self._file_path = os.fspath(file_path)
        # insertion order of the keys is the order names first appeared in
        self._sections: dict[str, list[Section]] = {}
        self._lock = ReadWriteLock()

    @property
    def file_path(self) -> str:
        return self._file_path

    def _register_section(self, section: Section) -> None:
        # caller holds the write lock
        self._sections.setdefault(section.name, []).append(section)

    def _unregister_name(self, name: str) -> list[Section]:
        # caller holds the write lock
        return self._sections.pop(name)

    def _iter_sections(self) -> Iterator[Section]:
        # caller holds the lock
        for sections in self._sections.values():
            yield from sections

    def add_section(self, name: str) -> Section:
        """Add a new section. If sections with that name exist already, the new
        section is added after them as another block of the same name.

        Args:
            name (str): Name of the section.

        Returns:
            Section: The new section.
        """
        section = Section(name, self.parameters)
        with self._lock.write():
            self._register_section(section)
        return section

    def section(self, name: str) -> Section:
        """Get the first section with a name.

        Args:
            name (str): The section name.

        Raises:
            SectionNotFound: If no section has that name.

        Returns:
            Section: The first section with that name.
        """
        with self._lock.read():
            try:
                return self._sections[name][0]
            except KeyError as e:
                raise SectionNotFound(f"Unable to find section '{name}'.") from e

    def sections(self, name: str = "") -> list[Section]:
        """Get all sections with a name.

        Args:
            name (str, optional): The section name. If empty, will return every
                section. Defaults to "".

        Raises:
            SectionNotFound: If name is not empty and no section has that name.

        Returns:
            list[Section]: The sections, in order of first appearance of their names
                and, within a name, in the order they were added.
        """
        with self._lock.read():
            if not name:
                return list(self._iter_sections())
            try:
                return list(self._sections[name])
            except KeyError as e:
                raise SectionNotFound(f"Unable to find section '{name}'.") from e

    def section_names(self) -> list[str]:
        """Get the distinct section names in the order they first appeared."""
        with self._lock.read():
            return list(self._sections)

    def string_value(self, section: str, option: str) -> str:
        """Get the value of an option in the first section with a name.

        Args:
            section (str): The section name.
            option (str): The option key.

        Raises:
            SectionNotFound: If no section has that name.

        Returns:
            str: The value or an empty string if the option doesn't exist.
        """
        return self.section(section).value_of(option)

    @staticmethod
    def _compile(pattern: SectionPattern) -> re.Pattern[str]:
        if isinstance(pattern, re.Pattern):
            return pattern
        try:
            return re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(
                f"Invalid section name pattern {pattern!r}: {e}"
            ) from e

    def _find_names(self, regex: re.Pattern[str]) -> list[str]:
        # caller holds the lock
        return [name for name in self._sections if regex.search(name)]

    def find(self, pattern: SectionPattern) -> list[Section]:
        """Find all sections whose name matches a regular expression.

        Args:
            pattern (SectionPattern): The regular expression. It may match anywhere
                in the name (anchor it with "^" and "$" for full matches).

        Raises:
            InvalidPatternError: If pattern is not a valid regular expression.

        Returns:
            list[Section]: The matching sections, in section order.
        """
        regex = self._compile(pattern)
        with self._lock.read():
            return [
                section
                for name in self._find_names(regex)
                for section in self._sections[name]
            ]

    def delete(self, pattern: SectionPattern) -> list[Section]:
        """Delete all sections whose name matches a regular expression.

        Args:
            pattern (SectionPattern): The regular expression (cf. find).

        Raises:
            InvalidPatternError: If pattern is not a valid regular expression. Nothing
                is deleted in that case.

        Returns:
            list[Section]: The deleted sections, in section order.
        """
        regex = self._compile(pattern)
        deleted: list[Section] = []
        with self._lock.write():
            for name in self._find_names(regex):
                deleted.extend(self._unregister_name(name))
        return deleted

    def print_section(self, name: str = "", file: TextIO | None = None) -> None:
        """Print all sections with a name. Warns if there is none.

        Args:
            name (str, optional): The section name. If empty, will print every
                section. Defaults to "".
            file (TextIO | None, optional): Where to print to. If None, will print to
                sys.stdout. Defaults to None.
        """
        try:
            sections = self.sections(name)
        except SectionNotFound as e:
            warnings.warn(str(e), SectionNotFoundWarning, stacklevel=2)
            return
        for section in sections:
            print(section.to_string(), end="", file=file)

    def to_string(self) -> str:
        """Convert the configuration into an ini string: all sections in section
        order, without anything in between.

        Returns:
            str: The ini string.
        """
        with self._lock.read():
            return "".join(section.to_string() for section in self._iter_sections())

    @copy_doc(to_string)
    def __str__(self) -> str:
        return self.to_string()

    def __contains__(self, name: str) -> bool:
        with self._lock.read():
            return name in self._sections

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sections)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} {self._file_path!r}:"
            f" {self.section_names()!r}>"
        )

    def read_ini(self, path: str | os.PathLike) -> None:
        """Read an ini file and add its sections (including its global section) after
        the existing ones. If reading fails, no section is added.

        Args:
            path (str | os.PathLike): Path to the INI file.
        """
        # read into a new IniFile first so that a failure leaves self untouched
        read = parse(path, self.parameters)
        with read._lock.read(), self._lock.write():
            for section in read._iter_sections():
                self._register_section(section)

    def save(self, path: str | os.PathLike | None = None) -> None:
        """Write the configuration to a file. An existing file is renamed to
        path + Parameters.backup_suffix first.

        Other threads may modify the configuration while the old file is backed up;
        the content written is the one at the time the backup is done.

        Args:
            path (str | os.PathLike | None, optional): Path to write to. If None, will
                use file_path. Defaults to None.

        Raises:
            ValueError: If path is None and the IniFile has no file_path.
            OSError: If the backup or writing fails (a missing file to back up is
                not an error).
        """
        if path is None:
            if not self._file_path:
                raise ValueError("No path to save to.")
            path = self._file_path
        path = os.path.normpath(os.fspath(path))
        backup = path + self.parameters.backup_suffix

        try:
            os.replace(path, backup)
        except FileNotFoundError:
            pass
        else:
            logger.debug("Backed up %s to %s", path, backup)

        content = self.to_string()
        with open(
            path, "w", encoding=self.parameters.encoding or "utf-8", newline=""
        ) as f:
            f.write(content)
        logger.debug("Saved %d sections to %s", len(self), path)


class _ReadIni:

    def __init__(self, target: IniFile, lines: Iterable[str]) -> None:
        """Read ini lines into target. For more info cf. read_stream."""
        self.target = target
        self.parameters = target.parameters

        # everything before the first header belongs to the global section
        self.current_section = target.add_section(self.parameters.global_section_name)

        self.current_line_index: int = 0
        self.current_line: str = ""

        for self.current_line_index, line in enumerate(lines, start=1):
            self.current_line = line.rstrip("\r\n")

            if not self.current_line:
                continue
            elif SectionName.is_header(self.current_line):
                self.current_section = self._handle_section_name(
                    SectionName(self.current_line)
                )
            else:
                # comments included, Section.add_option decides what to keep
                self.current_section.add_option(self.current_line)

    def _handle_section_name(self, section_name: SectionName) -> Section:
        """Add a new section for an extracted SectionName.

        Returns:
            Section: The new (now current) section.
        """
        logger.debug(
            "Line %d starts section '%s'.", self.current_line_index, section_name
        )
        return self.target.add_section(str(section_name))


def _read_text(path: str, encoding: str | None) -> str:
    """Read a file and decode it with encoding or, if None, the detected encoding.

    Args:
        path (str): Path to the file.
        encoding (str | None): The encoding to use.

    Returns:
        str: The file content.
    """
    raw = Path(path).read_bytes()
    if encoding is not None:
        content = raw.decode(encoding)
    elif raw and (best := read_from_bytes(raw).best()) is not None:
        content = str(best)
    else:
        content = raw.decode("utf-8")
    return content.removeprefix("\ufeff")


def read_stream(
    stream: Iterable[str],
    file_path: str | os.PathLike = "",
    parameters: Parameters | None = None,
    **kwargs,
) -> IniFile:
    """Read ini content from a stream of lines.

    Lines are read one by one: empty lines are skipped, lines starting with "[" start
    a new section, every other line is added to the current section
    (cf. Section.add_option). If reading the stream fails, the error is raised and
    nothing is returned.

    Args:
        stream (Iterable[str]): The lines, with or without line breaks (e.g. an open
            text file or a io.StringIO).
        file_path (str | os.PathLike, optional): Path to store as the IniFile's
            file_path. Defaults to "".
        parameters (Parameters | None, optional): Parameters for reading and writing.
            Defaults to None.
        **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

    Returns:
        IniFile: The configuration read.
    """
    ini_file = IniFile(file_path, parameters, **kwargs)
    _ReadIni(ini_file, stream)
    return ini_file


def parse(
    path: str | os.PathLike,
    parameters: Parameters | None = None,
    **kwargs,
) -> IniFile:
    """Read an INI file.

    Args:
        path (str | os.PathLike): Path to the INI file. It is normalized and stored
            as the IniFile's file_path.
        parameters (Parameters | None, optional): Parameters for reading and writing.
            Defaults to None.
        **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

    Raises:
        OSError: If the file can't be read.
        UnicodeDecodeError: If the file can't be decoded.

    Returns:
        IniFile: The configuration read.
    """
    path = os.path.normpath(os.fspath(path))
    ini_file = IniFile(path, parameters, **kwargs)
    content = _read_text(path, ini_file.parameters.encoding)
    _ReadIni(ini_file, content.split("\n"))
    logger.debug("Read %d section names from %s", len(ini_file), path)
    return ini_file
