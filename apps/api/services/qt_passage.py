"""
Encoding of the combined `daily_qt.passage` column.

The stored value is ``scripture + "|||" + interpretation``. Existing
clients split on the marker, so the format is kept byte-for-byte.
"""

from typing import Optional, Tuple

PASSAGE_DELIMITER = "|||"


def combine_passage(scripture: str, interpretation: str) -> str:
    """
    Join the two parts. Raises ValueError if the scripture already holds the
    marker, since the stored value could no longer be split back.
    """
    if PASSAGE_DELIMITER in scripture:
        raise ValueError(f"scripture text contains the passage marker {PASSAGE_DELIMITER!r}")
    return f"{scripture}{PASSAGE_DELIMITER}{interpretation}"


def split_passage(passage: Optional[str]) -> Tuple[str, str]:
    """
    Recover (scripture, interpretation) from a stored passage.

    Tolerates legacy rows: no marker means the whole value is scripture;
    only the first marker splits, so a stray "|||" inside the
    interpretation survives.
    """
    if not passage:
        return "", ""
    if PASSAGE_DELIMITER not in passage:
        return passage, ""
    scripture, interpretation = passage.split(PASSAGE_DELIMITER, 1)
    return scripture, interpretation
