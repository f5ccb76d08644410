"""Runtime configuration for the OS open data importer."""

from __future__ import annotations

import os
from importlib.resources import files
from importlib.resources.abc import Traversable

import psycopg
from psycopg.conninfo import make_conninfo

from osimport.errors import ConfigurationError

DSN_ENV_VAR = "OSIMPORT_DSN"

WGS84_SRID = 4326
SOURCE_CRS = "EPSG:27700"
TARGET_CRS = "EPSG:4326"

CODEPOINT_DELIMITER = ","
CODEPOINT_ENCODING = "utf-8-sig"
CODEPOINT_FILE_GLOB = "*.csv"

# Column codes used by the Code-Point header definition file.
POSTCODE_COLUMN_CODE = "PC"
EASTING_COLUMN_CODE = "EA"
NORTHING_COLUMN_CODE = "NO"

DEFAULT_CODEPOINT_COLUMNS = {
    POSTCODE_COLUMN_CODE: 0,
    EASTING_COLUMN_CODE: 10,
    NORTHING_COLUMN_CODE: 11,
}

GAZETTEER_DELIMITER = ":"
GAZETTEER_ENCODING = "latin-1"

FEATURE_CODES_RESOURCE = "feature_codes.json"


def default_dsn() -> str:
    return os.getenv(DSN_ENV_VAR, "")


def build_conninfo(server: str, database: str, base_dsn: str | None = None) -> str:
    """Merge the target server and database into a base libpq conninfo string."""

    base = default_dsn() if base_dsn is None else base_dsn
    try:
        return make_conninfo(base, host=server, dbname=database)
    except psycopg.ProgrammingError as exc:
        raise ConfigurationError(f"Invalid connection string: {exc}") from exc


def feature_codes_config_path() -> Traversable:
    # Package data, declared in pyproject.toml.
    return files("osimport") / FEATURE_CODES_RESOURCE
