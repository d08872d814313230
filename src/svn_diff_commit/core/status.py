"""Parser for ``svn status`` output.

Only "missing" entries matter to a diff-commit: paths that the working
copy tracks but that are absent on disk.  svn reports them with ``!`` in
the first column, for example::

    !       wc/1.txt
    ?       wc/new.txt
    M       wc/2.txt

Every other status code is ignored.
"""

from collections.abc import Iterator

from ..errors import UnrecognizedStatusLineError

MISSING = "!"


def parse_missing(raw_output: str) -> Iterator[str]:
    """Yield the paths ``svn status`` reports as missing.

    Each line is stripped of surrounding whitespace.  Lines shorter than
    three characters are then skipped, as are lines whose first character
    is not ``!``.  The status code must be followed by a
    space or tab; the rest of the line, stripped, is the path.

    This is a generator: it is lazy and can be consumed only once.

    Raises:
        UnrecognizedStatusLineError: A ``!`` line has some other second
            character.  Raised when that line is reached.
    """
    for line in raw_output.splitlines():
        line = line.strip()
        if len(line) < 3:
            continue
        if line[0] != MISSING:
            continue
        if line[1] not in (" ", "\t"):
            raise UnrecognizedStatusLineError(line)
        yield line[1:].strip()
