"""Database field shims to support non-Postgres test environments."""

from __future__ import annotations

import json

from django.contrib.postgres.fields import ArrayField
from pgvector.django import VectorField


class CompatArrayField(ArrayField):
    """ArrayField that degrades to JSON/text storage when Postgres is unavailable."""

    def db_type(self, connection):
        if connection.vendor != "postgresql":
            return "text"
        return super().db_type(connection)

    def get_prep_value(self, value):
        if value is None:
            return []
        return super().get_prep_value(value)

    def get_db_prep_save(self, value, connection):
        if connection.vendor == "postgresql":
            return super().get_db_prep_save(value, connection)
        if value is None:
            return json.dumps([])
        value = self.get_prep_value(value)
        return json.dumps(list(value))

    def get_placeholder(self, value, compiler, connection):
        if connection.vendor != "postgresql":
            return "%s"
        return super().get_placeholder(value, compiler, connection)

    def from_db_value(self, value, expression, connection):
        if connection.vendor == "postgresql":
            return value
        if value in (None, ""):
            return []
        if isinstance(value, list):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value


class CompatVectorField(VectorField):
    """VectorField fallback storing text for non-Postgres backends."""

    def db_type(self, connection):
        if connection.vendor != "postgresql":
            return "text"
        return super().db_type(connection)
