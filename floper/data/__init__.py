"""Spreadsheet parsing, normalization, and remote table I/O."""
from .errors import (
    FloperError, EmptyInputError, SpreadsheetError,
    StorageError, RemoteWriteFailure, RemoteReadFailure, RemoteDeleteFailure,
)
from .schemas import RecordKind, KindName, KINDS, get_kind
from .normalize import normalize_rows, to_storage_rows
from .loader import parse_spreadsheet, parse_file
