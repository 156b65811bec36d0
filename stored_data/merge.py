from __future__ import annotations

from typing import Any


def merge_into(target: Any, source: Any) -> Any:
    """
    Update `target` in place so its content equals `source`, keeping identities.

    - dict <- dict: drop keys missing from source, recurse into nested dicts,
      refill nested lists in place, assign everything else.
    - list <- list: clear and refill.

    Nested dicts/lists that exist on both sides keep their identity, so references
    held by callers keep observing live values. Returns `target`.
    """
    if isinstance(target, dict) and isinstance(source, dict):
        _merge_dict(target, source)
        return target
    if isinstance(target, list) and isinstance(source, list):
        _refill_list(target, source)
        return target
    raise TypeError(
        f"Cannot merge {type(source).__name__} into {type(target).__name__}; root kinds must match"
    )


def _merge_dict(target: dict[str, Any], source: dict[str, Any]) -> None:
    for key in [k for k in target if k not in source]:
        del target[key]

    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_dict(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            _refill_list(current, value)
        else:
            target[key] = value


def _refill_list(target: list[Any], source: list[Any]) -> None:
    # Copy first: source may be target itself.
    items = list(source)
    target.clear()
    target.extend(items)
