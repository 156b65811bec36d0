from __future__ import annotations

from .config import StoreConfig, StoreOptions
from .disk_store import DiskFileSystem
from .errors import ParseError, SchemaDefinitionError, StoredDataError, ValidationError
from .interfaces import DocumentStore, FileSystem
from .locks import FileLockRegistry, SequentialFileLock
from .merge import merge_into
from .schema import (
    ArrayNode,
    ObjectNode,
    PrimitiveNode,
    SchemaNode,
    create_default,
    define_schema,
    parse_schema,
    validate,
)
from .settings import Settings, get_settings, load_settings
from .store import Store, StoreContext, default_context, open_store

__all__ = [
    "ArrayNode",
    "ObjectNode",
    "PrimitiveNode",
    "SchemaNode",
    "create_default",
    "define_schema",
    "parse_schema",
    "validate",
    "merge_into",
    "FileLockRegistry",
    "SequentialFileLock",
    "DocumentStore",
    "FileSystem",
    "DiskFileSystem",
    "StoreConfig",
    "StoreOptions",
    "Settings",
    "get_settings",
    "load_settings",
    "Store",
    "StoreContext",
    "default_context",
    "open_store",
    "StoredDataError",
    "SchemaDefinitionError",
    "ParseError",
    "ValidationError",
]
