from typing import Literal

GLOBAL_SECTION_NAME = "global"
"""Name of the implicit section holding everything before the first header."""
BACKUP_SUFFIX = ".bak"
SECTION_NAME_BRACKETS = " []"
"""Characters stripped from both ends of a header line to get the section name."""
VALID_MARKERS = Literal[
    "!",
    '"',
    "%",
    "&",
    "/",
    "?",
    ":",
    ";",
    "#",
    "'",
    "*",
    ">",
    "<",
    "=",
]
"""Valid characters for markers (option delimiter or comment prefix)."""
