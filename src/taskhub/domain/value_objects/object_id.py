"""Object id - opaque 24 hex character identifier."""

import os
import re
import struct
import time

from taskhub.domain.exceptions import InvalidId

_OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")


def new_object_id() -> str:
    """Generate an id: 4 bytes of unix time followed by 8 random bytes."""
    return (struct.pack(">I", int(time.time()) & 0xFFFFFFFF) + os.urandom(8)).hex()


def is_valid_object_id(value: object) -> bool:
    """Check that value is a 24 character hex string."""
    return isinstance(value, str) and _OBJECT_ID_RE.fullmatch(value) is not None


def parse_object_id(value: object, what: str = "resource") -> str:
    """Validate and normalise an id, raising InvalidId when malformed."""
    if not is_valid_object_id(value):
        raise InvalidId(value, what)
    return value.lower()
