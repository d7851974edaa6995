import re

from remotecontrol.core.models.command import ParsedCommand


_FIRST_WHITESPACE_RUN = re.compile(r"\s+")


def parse(line: str) -> ParsedCommand:
    """
    Split a received line into its command token and argument.

    The line is trimmed, then split on its first whitespace run. The token
    is everything before that run; the argument is everything after it,
    verbatim. A line without whitespace yields an empty argument and a blank
    line yields an empty token. Parsing never fails.
    """
    stripped = line.strip()
    parts = _FIRST_WHITESPACE_RUN.split(stripped, maxsplit=1)
    if len(parts) == 1:
        return ParsedCommand(name=parts[0])
    return ParsedCommand(name=parts[0], argument=parts[1])
