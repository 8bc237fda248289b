"""Custom column types shared by the tenant-scoped models."""

import uuid

from sqlalchemy import String, TypeDecorator


class UUID(TypeDecorator):
    """UUID stored as a CHAR(36) string.

    MySQL and SQLite have no native UUID column, so values round-trip
    through their canonical string form.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)
