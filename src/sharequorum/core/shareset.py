"""
Loading share sets from JSON documents.

Document layout:

    {
        "keys": {"n": 4, "k": 3},
        "1": {"base": "10", "value": "4"},
        "2": {"base": "2", "value": "111"},
        ...
    }

"keys" declares the number of shares handed out (n) and the threshold
(k). Every field named by an unsigned integer is a share: the name is its
x-coordinate and "value" is y written in "base". Other fields are ignored.
"""

import json
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..crypto.encoding import decode_value
from ..crypto.shamir import Share
from ..errors import InvalidShareSetError, ShareFileError


logger = logging.getLogger(__name__)

KEYS_FIELD = "keys"
SHARE_FIELD = re.compile(r"[0-9]+")

# Path that means "read the document from standard input".
STDIN_PATH = "-"


@dataclass(frozen=True)
class ShareSet:
    """
    Decoded shares of one secret, sorted by x.

    Attributes:
        n: Declared total number of shares.
        k: Reconstruction threshold.
        shares: Decoded shares in ascending x order, x values distinct.
    """

    n: int
    k: int
    shares: tuple[Share, ...]

    def __len__(self) -> int:
        return len(self.shares)

    @property
    def x_values(self) -> list[int]:
        return [s.x for s in self.shares]


def load_share_document(path: str | Path) -> dict[str, Any]:
    """
    Read a share document from a JSON file, or stdin for "-".

    Raises:
        ShareFileError: If the file is missing or not valid JSON
    """
    try:
        if str(path) == STDIN_PATH:
            document = json.load(sys.stdin)
        else:
            p = Path(path)
            if not p.exists():
                raise ShareFileError(f"Share file not found: {path}")
            with p.open("r", encoding="utf-8") as f:
                document = json.load(f)
    except json.JSONDecodeError as e:
        raise ShareFileError(f"Invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ShareFileError(f"Share file is not valid UTF-8: {e}") from e
    except ValueError as e:
        # int() digit limit on very long number literals
        raise ShareFileError(f"Invalid JSON: {e}") from e
    except OSError as e:
        raise ShareFileError(f"Cannot read share file {path}: {e}") from e

    if not isinstance(document, dict):
        raise ShareFileError("Share document must be a JSON object")
    return document


def _int_field(record: dict[str, Any], name: str, where: str) -> int:
    if name not in record:
        raise ShareFileError(f"Missing required field: {where}.{name}")

    raw = record[name]
    if isinstance(raw, bool):
        raise ShareFileError(f"{where}.{name} must be an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ShareFileError(f"{where}.{name} must be an integer, got {raw!r}") from e


def parse_share(name: str, record: Any) -> Share:
    """
    Decode one share field.

    Raises:
        ShareFileError: If the record is not an object or lacks base/value
        InvalidBaseError: If base is outside [2, 36]
        InvalidDigitError: If value has a digit invalid for the base
    """
    if not isinstance(record, dict):
        raise ShareFileError(f"Share {name} must be an object")

    base = _int_field(record, "base", name)
    if "value" not in record:
        raise ShareFileError(f"Missing required field: {name}.value")
    value = record["value"]
    if not isinstance(value, str):
        raise ShareFileError(f"{name}.value must be a string, got {value!r}")

    try:
        x = int(name)
    except ValueError as e:
        raise ShareFileError(f"Share index {name[:20]}... is too long: {e}") from e

    return Share(x=x, y=decode_value(value, base))


def parse_share_set(document: dict[str, Any]) -> ShareSet:
    """
    Build a ShareSet from a parsed share document.

    Raises:
        ShareFileError: If "keys" or a share record is malformed
        InvalidShareSetError: If two fields decode to the same x
        InvalidBaseError, InvalidDigitError: From decoding share values
    """
    keys = document.get(KEYS_FIELD)
    if not isinstance(keys, dict):
        raise ShareFileError(f"Missing required field: {KEYS_FIELD}")

    n = _int_field(keys, "n", KEYS_FIELD)
    k = _int_field(keys, "k", KEYS_FIELD)

    shares: list[Share] = []
    for name, record in document.items():
        if name == KEYS_FIELD:
            continue
        if not SHARE_FIELD.fullmatch(name):
            logger.debug("Ignoring non-share field %r", name)
            continue
        shares.append(parse_share(name, record))

    shares.sort(key=lambda s: s.x)

    # "1" and "01" name the same x
    for prev, cur in zip(shares, shares[1:]):
        if prev.x == cur.x:
            raise InvalidShareSetError(f"Duplicate x value in shares: {cur.x}")

    if n != len(shares):
        logger.warning("keys.n declares %d shares but %d were supplied", n, len(shares))

    logger.info("Loaded %d shares (k=%d): x=%s", len(shares), k, [s.x for s in shares])
    return ShareSet(n=n, k=k, shares=tuple(shares))


def load_share_set(path: str | Path) -> ShareSet:
    """Read and decode a share document in one step."""
    return parse_share_set(load_share_document(path))
