from .globals import VALID_MARKERS, GLOBAL_SECTION_NAME, BACKUP_SUFFIX


class Parameters:
    """Parameters for reading and writing."""

    def __init__(
        self,
        option_delimiters: VALID_MARKERS | tuple[VALID_MARKERS, ...] = ("=", ":"),
        comment_prefixes: VALID_MARKERS | tuple[VALID_MARKERS, ...] = ("#", ";"),
        keep_comments: bool = False,
        global_section_name: str = GLOBAL_SECTION_NAME,
        backup_suffix: str = BACKUP_SUFFIX,
        encoding: str | None = None,
    ) -> None:
        """
        Args:
            option_delimiters (VALID_MARKERS | tuple[VALID_MARKERS,...], optional):
                Delimiter character(s) that delimit option keys from values. A line is
                split on the first occurrence of the first delimiter it contains, in
                the given order. The first delimiter is also used for writing.
                Defaults to ("=", ":").
            comment_prefixes (VALID_MARKERS | tuple[VALID_MARKERS,...], optional):
                Prefix character(s) that denote a comment line. Only relevant if
                keep_comments is True. Defaults to ("#", ";").
            keep_comments (bool, optional): Whether comment lines should be kept as
                options with the whole line as key and an empty value. If False,
                comment lines are handled like any other line and are dropped unless
                they contain a delimiter followed by a value. Defaults to False.
            global_section_name (str, optional): Name of the implicit section holding
                the lines before the first section header. That section is written
                without header. Defaults to "global".
            backup_suffix (str, optional): Suffix appended to the path of an existing
                file that is being replaced on save. Defaults to ".bak".
            encoding (str | None, optional): Encoding for reading and writing files.
                If None, will detect the encoding on reading and write UTF-8.
                Defaults to None.
        """
        # because comment_prefixes and option_delimiters check each other on setting
        self._comment_prefixes = ()
        self._option_delimiters = ()

        self.option_delimiters = option_delimiters
        self.comment_prefixes = comment_prefixes
        self.keep_comments = keep_comments
        self.global_section_name = global_section_name
        self.backup_suffix = backup_suffix
        self.encoding = encoding

    @property
    def option_delimiters(self) -> tuple[VALID_MARKERS, ...]:
        return self._option_delimiters

    @option_delimiters.setter
    def option_delimiters(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...]
    ) -> None:
        if not isinstance(value, tuple):
            value = (value,)
        if not value:
            raise ValueError("At least one option delimiter is required.")
        self.verify_marker(value, "option delimiter")
        self._option_delimiters = value
        self.verify_between_markers()

    @property
    def comment_prefixes(self) -> tuple[VALID_MARKERS, ...]:
        return self._comment_prefixes

    @comment_prefixes.setter
    def comment_prefixes(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...] | None
    ) -> None:
        if value is None:
            value = ()
        elif not isinstance(value, tuple):
            value = (value,)
        self.verify_marker(value, "comment prefix")
        self._comment_prefixes = value
        self.verify_between_markers()

    @property
    def global_section_name(self) -> str:
        return self._global_section_name

    @global_section_name.setter
    def global_section_name(self, value: str) -> None:
        if not value:
            raise ValueError("The global section needs a name.")
        self._global_section_name = value

    @property
    def backup_suffix(self) -> str:
        return self._backup_suffix

    @backup_suffix.setter
    def backup_suffix(self, value: str) -> None:
        if not value:
            # the backup would replace the file itself
            raise ValueError("backup_suffix must not be empty.")
        self._backup_suffix = value

    def verify_marker(self, marker: tuple[str, ...], name: str) -> None:
        for val in marker:
            if len(val) != 1:
                raise ValueError(f"A {name} must be a single character, got '{val}'.")
            if val == "[":
                raise ValueError(
                    f"'[' (section name identifier) is not allowed as a {name}."
                )

    def verify_between_markers(self) -> None:
        if set(self.comment_prefixes).intersection(self.option_delimiters):
            raise ValueError(
                "Comment prefixes and option delimiters have to be distinct from each other."
            )

    def update(self, **kwargs) -> None:
        """Update parameters with kwargs. Either all parameters are updated or,
        if one of them is invalid, none.

        Args:
            **kwargs: Keyword-arguments to update the parameters with.
        """
        # markers are verified against each other, so validate on a copy
        self.__dict__.update(self.copy(**kwargs).__dict__)

    def copy(self, **kwargs) -> "Parameters":
        """Create a copy of the parameters, updated with kwargs.

        Args:
            **kwargs: Keyword-arguments to update the copy with.

        Returns:
            Parameters: The new Parameters object.
        """
        return Parameters(
            **{
                "option_delimiters": self.option_delimiters,
                "comment_prefixes": self.comment_prefixes,
                "keep_comments": self.keep_comments,
                "global_section_name": self.global_section_name,
                "backup_suffix": self.backup_suffix,
                "encoding": self.encoding,
            }
            | kwargs
        )

    def __repr__(self) -> str:
        return (
            f"Parameters(option_delimiters={self.option_delimiters!r},"
            f" comment_prefixes={self.comment_prefixes!r},"
            f" keep_comments={self.keep_comments!r},"
            f" global_section_name={self.global_section_name!r},"
            f" backup_suffix={self.backup_suffix!r}, encoding={self.encoding!r})"
        )
