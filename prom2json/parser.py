"""Top-level parsing of a whole exposition document."""
import logging
from typing import List

from prom2json.family import build_family
from prom2json.models import Document

logger = logging.getLogger(__name__)


def parse_document(text: str) -> Document:
    """
    Parse exposition text into a Document.

    A family starts at its HELP line; the first two comment lines seen since
    the last flush are its HELP/TYPE pair, and a third one begins the next
    family. The last family is flushed at end of input.

    Raises:
        ParseError: on any malformed line or metadata; no partial result
    """
    families = []
    family_lines: List[str] = []
    comment_lines = 0

    # Only \n and \r\n end a line; label values and HELP text may hold any
    # other Unicode line separator.
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip():
            continue

        if line.startswith("#"):
            if comment_lines == 2:
                families.append(build_family(family_lines))
                family_lines = [line]
                comment_lines = 1
            else:
                comment_lines += 1
                family_lines.append(line)
        else:
            family_lines.append(line)

    if family_lines:
        families.append(build_family(family_lines))

    logger.debug(f"Parsed {len(families)} metric families")
    return Document(families=families)
