"""Read fields from a TOML project manifest (Cargo.toml)."""

from __future__ import annotations

import tomllib
from pathlib import Path

from rel.core.result import Err, Ok, Result
from rel.core.structured import StrDict, as_obj_list, as_str_dict, get_str
from rel.services.errors import ManifestError, NotFoundError, ParseError


def _load(path: Path) -> Result[StrDict, ParseError]:
    try:
        text = path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        return Err(ParseError(path=path, reason="file not found"))
    except OSError as e:
        return Err(ParseError(path=path, reason=str(e)))
    except UnicodeDecodeError as e:
        return Err(ParseError(path=path, reason=f"not UTF-8: {e}"))

    try:
        data: object = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        return Err(ParseError(path=path, reason=f"invalid TOML: {e}"))

    table = as_str_dict(data)
    if table is None:
        return Err(ParseError(path=path, reason="root is not a table"))
    return Ok(table)


def lookup(data: StrDict, field: str) -> object | None:
    """Walk a dotted path (``package.version``) through nested tables."""
    node: object = data
    for part in field.split("."):
        table = as_str_dict(node)
        if table is None or part not in table:
            return None
        node = table[part]
    return node


class TomlManifestReader:
    """ManifestReader for TOML files. Stateless, no side effects."""

    def read(self, path: Path, field: str) -> Result[str, ManifestError]:
        if not field or any(not part for part in field.split(".")):
            return Err(ParseError(path=path, reason=f"invalid field path: {field!r}"))

        loaded = _load(path)
        if isinstance(loaded, Err):
            return loaded

        value = lookup(loaded.value, field)
        if value is None:
            return Err(NotFoundError(path=path, field=field))
        if not isinstance(value, str):
            # e.g. `version.workspace = true` inherits from a workspace root.
            return Err(
                ParseError(
                    path=path,
                    reason=f"{field} is a {type(value).__name__}, expected a string",
                )
            )
        return Ok(value)


def read_binary_name(path: Path) -> Result[str, ManifestError]:
    """Name of the binary cargo produces: ``package.name``, else the first ``[[bin]]``."""
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded

    name_obj = lookup(loaded.value, "package.name")
    if isinstance(name_obj, str) and name_obj.strip():
        return Ok(name_obj.strip())

    bins = as_obj_list(loaded.value.get("bin"))
    if bins:
        first = as_str_dict(bins[0])
        if first is not None:
            name = get_str(first, "name")
            if name is not None:
                return Ok(name)

    return Err(NotFoundError(path=path, field="package.name"))
