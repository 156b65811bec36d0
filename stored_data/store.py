from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Mapping

from .config import StoreConfig, StoreOptions
from .disk_store import DiskFileSystem
from .errors import SchemaDefinitionError, ValidationError
from .interfaces import DocumentStore, FileSystem
from .json_store import dump_json, is_blank, read_json
from .locks import FileLockRegistry, SequentialFileLock
from .merge import merge_into
from .paths import resolve_path
from .schema import ArrayNode, ObjectNode, SchemaNode, create_default, json_type_name, validate
from .settings import Settings, get_settings, load_settings

logger = logging.getLogger(__name__)


class Store(DocumentStore):
    """
    A JSON file exposed as a live `data` value (a dict, or a list in array storage mode).

    `data` is never rebound: reload() and reset() update it in place, so references
    held elsewhere (to `data` or to nested dicts/lists) keep seeing current values.
    All file-touching operations go through the lock shared by every store on the path.
    """

    def __init__(
        self,
        *,
        data: Any,
        file_path: Path,
        schema: SchemaNode,
        options: StoreOptions,
        default_value: Any,
        lock: SequentialFileLock,
        fs: FileSystem,
    ) -> None:
        self.data = data
        self.file_path = file_path
        self.schema = schema
        self.options = options
        self.lock = lock
        self._default_value = default_value
        self._fs = fs

    def __repr__(self) -> str:
        return f"Store(file_path={str(self.file_path)!r}, data={self.data!r})"

    @property
    def default_value(self) -> Any:
        return copy.deepcopy(self._default_value)

    async def write(self) -> None:
        await self.lock.run(self._write)

    async def reload(self) -> None:
        await self.lock.run(self._reload)

    async def reset(self, new_value: Any = None) -> None:
        await self.lock.run(lambda: self._reset(new_value))

    async def _write(self) -> None:
        if self.options.auto_validate:
            try:
                validate(self.data, self.schema, coerce=bool(self.options.coerce))
            except ValidationError as e:
                raise e.with_context("Data validation failed before write") from e
        await self._persist()
        logger.debug("STORE WRITE: %s", self.file_path)

    async def _reload(self) -> None:
        raw = await self._fs.read_text(self.file_path, self._encoding)
        fresh = self._default_value if is_blank(raw) else read_json(raw, self.file_path)
        self._apply(fresh, "Existing file data validation failed")
        logger.debug("STORE RELOAD: %s", self.file_path)

    async def _reset(self, new_value: Any) -> None:
        value = self._default_value if new_value is None else new_value
        self._apply(value, "Reset value validation failed")
        await self._persist()
        logger.debug("STORE RESET: %s", self.file_path)

    def _apply(self, value: Any, context: str) -> None:
        prepared = _prepare(value, self.schema, self.options, context)
        merge_into(self.data, prepared)

    async def _persist(self) -> None:
        # Serialize before touching the file so a bad payload never truncates it.
        text = dump_json(self.data)
        await self._fs.write_text(self.file_path, text, self._encoding)

    @property
    def _encoding(self) -> str:
        return self.options.encoding or "utf-8"


class StoreContext:
    """
    Owns what stores opened together share: the lock registry, the file system
    and the settings.

    Two stores opened through the same context against the same path share one
    FIFO lock. Separate contexts (e.g. one per test) do not see each other's locks.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        locks: FileLockRegistry | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.locks = locks or FileLockRegistry()
        self.fs = fs or DiskFileSystem()

    @classmethod
    def from_env(cls, env_file: Path | str | None = "local.env", **kwargs: Any) -> "StoreContext":
        settings = load_settings(env_file)
        if settings.log_level is not None:
            logging.getLogger("stored_data").setLevel(settings.log_level)
        return cls(settings=settings, **kwargs)

    async def open(
        self,
        config: StoreConfig | Mapping[str, Any],
        options: StoreOptions | Mapping[str, Any] | None = None,
    ) -> Store:
        cfg = config if isinstance(config, StoreConfig) else StoreConfig.model_validate(config)
        opts = options if isinstance(options, StoreOptions) else StoreOptions.model_validate(options or {})
        opts = opts.resolved(self.settings)
        encoding = opts.encoding or "utf-8"

        root = cfg.root
        if not isinstance(root, (ObjectNode, ArrayNode)):
            raise SchemaDefinitionError(f"Store root schema must be an object or an array, got '{root}'")

        abs_path = resolve_path(cfg.file)
        default_value = copy.deepcopy(cfg.default) if cfg.default is not None else create_default(root)

        # Checked before the file system is touched.
        initial = _prepare(default_value, root, opts, "Initial value validation failed")

        # Not serialized through the lock: concurrent first opens of a new path may race.
        if not await self.fs.exists(abs_path):
            logger.info("STORE OPEN: file not found, creating %s", abs_path)
            await self.fs.make_dirs(abs_path.parent)
            await self.fs.write_text(abs_path, dump_json(initial), encoding)
            data = initial
        else:
            raw = await self.fs.read_text(abs_path, encoding)
            if is_blank(raw):
                data = initial
            else:
                parsed = read_json(raw, abs_path)
                data = _prepare(parsed, root, opts, "Existing file data validation failed")

        logger.debug("STORE OPEN: %s (%s storage)", abs_path, cfg.storage_type)
        return Store(
            data=data,
            file_path=abs_path,
            schema=root,
            options=opts,
            default_value=default_value,
            lock=self.locks.lock_for(abs_path),
            fs=self.fs,
        )


def _prepare(value: Any, root: SchemaNode, options: StoreOptions, context: str) -> Any:
    """
    Turn `value` into something safe to adopt as (or merge into) store data:
    validated when auto_validate is on, otherwise a deep copy of the raw value.
    """
    if options.auto_validate:
        try:
            prepared = validate(value, root, coerce=bool(options.coerce))
        except ValidationError as e:
            raise e.with_context(context) from e
    else:
        prepared = copy.deepcopy(value)

    expected, kind = ("array", list) if isinstance(root, ArrayNode) else ("object", dict)
    if not isinstance(prepared, kind):
        actual = json_type_name(prepared)
        raise ValidationError(
            f"{context}: Root value must be an {expected}, got {actual}",
            expected=expected,
            actual=actual,
            value=prepared,
        )
    return prepared


_default_context: StoreContext | None = None


def default_context() -> StoreContext:
    """Process-wide context used when open_store is called without one."""
    global _default_context
    if _default_context is None:
        _default_context = StoreContext()
    return _default_context


async def open_store(
    config: StoreConfig | Mapping[str, Any],
    options: StoreOptions | Mapping[str, Any] | None = None,
    *,
    context: StoreContext | None = None,
) -> Store:
    """
    Open (creating if needed) the JSON file described by `config` and return its Store.

        store = await open_store({"file": "data/app.json", "schema": {"count": "number"}})
        store.data["count"] += 1
        await store.write()
    """
    return await (context or default_context()).open(config, options)
