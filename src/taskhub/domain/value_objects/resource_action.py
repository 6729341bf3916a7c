"""Actions performed on a resource."""

from enum import StrEnum


class ResourceAction(StrEnum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    SHARE = "share"
