"""Configuration schemas and the static register table."""

from .schema import REGISTER_SCHEMA, REGISTER_TABLE_SCHEMA, SETTINGS_SCHEMA

__all__ = ["REGISTER_SCHEMA", "REGISTER_TABLE_SCHEMA", "SETTINGS_SCHEMA"]
