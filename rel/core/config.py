"""Typed loading of the optional ``rel.toml`` pipeline configuration.

Every key has a default matching the stock pipeline: read ``package.version``
from ``Cargo.toml``, build ``x86_64-pc-windows-gnu`` on the stable toolchain,
package it as a zip and publish it under a tag equal to the version.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_list, get_str, get_table

__all__ = [
    "ARCHIVE_FORMATS",
    "ArchiveFormat",
    "BuildTarget",
    "Config",
    "ConfigError",
    "ReleaseOptions",
    "credential_from_env",
    "load_config",
    "load_project_config",
]

CONFIG_FILE_NAME = "rel.toml"

ArchiveFormat = Literal["zip", "tar.gz", "tar.xz", "tar.bz2"]
ARCHIVE_FORMATS: tuple[ArchiveFormat, ...] = ("zip", "tar.gz", "tar.xz", "tar.bz2")

# The compile step never uploads; assets always travel through the release step.
UPLOAD_MODES = ("none",)

# arch[-vendor]-os[-abi], e.g. x86_64-pc-windows-gnu, wasm32-wasip1
_TRIPLE_RE = re.compile(r"^[a-z0-9_.]+(-[a-z0-9_.]+){1,3}$")

# Checked in order; the first non-empty one wins.
CREDENTIAL_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or validated."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """One entry of the build target list."""

    triple: str = "x86_64-pc-windows-gnu"
    archive: ArchiveFormat = "zip"
    toolchain: str = "stable"
    upload_mode: str = "none"

    @property
    def is_windows(self) -> bool:
        return "windows" in self.triple

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> BuildTarget:
        triple = get_str(data, "triple") or get_str(data, "target")
        if triple is None:
            raise ValueError("target entry is missing 'triple'")
        if not _TRIPLE_RE.match(triple):
            raise ValueError(f"not a target triple: {triple!r}")

        archive = get_str(data, "archive") or "zip"
        if archive not in ARCHIVE_FORMATS:
            raise ValueError(
                f"unsupported archive format {archive!r} (expected one of "
                f"{', '.join(ARCHIVE_FORMATS)})"
            )

        upload_mode = get_str(data, "upload_mode") or "none"
        if upload_mode not in UPLOAD_MODES:
            raise ValueError(f"unsupported upload_mode {upload_mode!r} (only 'none')")

        return cls(
            triple=triple,
            archive=cast(ArchiveFormat, archive),
            toolchain=get_str(data, "toolchain") or "stable",
            upload_mode=upload_mode,
        )


def _default_targets() -> tuple[BuildTarget, ...]:
    return (BuildTarget(),)


def _default_extra_files() -> tuple[str, ...]:
    return ("README.md", "LICENSE")


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Flags forwarded to the hosted release."""

    draft: bool = False
    prerelease: bool = False
    body: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Pipeline configuration."""

    manifest: str = "Cargo.toml"
    version_field: str = "package.version"
    tag_prefix: str = ""
    remote: str = "origin"
    repo: str | None = None  # owner/name; gh infers it from the remote when unset
    release_name: str = "Release {tag}"
    out_dir: str = "target/dist"
    extra_files: tuple[str, ...] = field(default_factory=_default_extra_files)
    targets: tuple[BuildTarget, ...] = field(default_factory=_default_targets)
    release: ReleaseOptions = field(default_factory=ReleaseOptions)

    def format_release_name(self, tag: str) -> str:
        return self.release_name.format(tag=tag)

    def target(self, triple: str) -> BuildTarget | None:
        for t in self.targets:
            if t.triple == triple:
                return t
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a parsed TOML mapping.

        Raises:
            ValueError: When a value is present but invalid.
        """
        release: StrDict = get_table(data, "release") or {}

        targets: tuple[BuildTarget, ...] = _default_targets()
        raw_targets = get_list(data, "targets")
        if raw_targets is None and "targets" in data:
            raise ValueError("targets must be an array of tables ([[targets]])")
        if raw_targets is not None:
            parsed: list[BuildTarget] = []
            for item in raw_targets:
                tbl = as_str_dict(item)
                if tbl is None:
                    raise ValueError("each [[targets]] entry must be a table")
                parsed.append(BuildTarget.from_dict(tbl))
            if not parsed:
                raise ValueError("targets must not be empty")
            triples = [t.triple for t in parsed]
            if len(set(triples)) != len(triples):
                raise ValueError("duplicate target triple in targets")
            targets = tuple(parsed)

        extra_files = _default_extra_files()
        raw_extra = get_list(data, "extra_files")
        if raw_extra is not None:
            if not all(isinstance(x, str) for x in raw_extra):
                raise ValueError("extra_files must be a list of strings")
            extra_files = tuple(cast(list[str], raw_extra))

        release_name = get_str(data, "release_name") or "Release {tag}"
        try:
            rendered = release_name.format(tag="\0")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(f"release_name is not a valid template: {e!r}") from e
        if "\0" not in rendered:
            raise ValueError("release_name must contain '{tag}'")

        tag_prefix = data.get("tag_prefix", "")
        if not isinstance(tag_prefix, str):
            raise ValueError("tag_prefix must be a string")

        return cls(
            manifest=get_str(data, "manifest") or "Cargo.toml",
            version_field=get_str(data, "version_field") or "package.version",
            tag_prefix=tag_prefix.strip(),
            remote=get_str(data, "remote") or "origin",
            repo=get_str(data, "repo"),
            release_name=release_name,
            out_dir=get_str(data, "out_dir") or "target/dist",
            extra_files=extra_files,
            targets=targets,
            release=ReleaseOptions(
                draft=bool(get_bool(release, "draft")),
                prerelease=bool(get_bool(release, "prerelease")),
                body=get_str(release, "body"),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate configuration from a TOML file.

    Args:
        path: Path to rel.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_project_config(
    project_root: Path, explicit: Path | None = None
) -> Result[Config, ConfigError]:
    """Load ``rel.toml`` from the project root, or defaults when it is absent.

    An explicitly requested file must exist.
    """
    if explicit is not None:
        return load_config(explicit)

    path = project_root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)


def credential_from_env(env: Mapping[str, str] | None = None) -> str | None:
    """Return the token used for tag pushes and release creation."""
    source = os.environ if env is None else env
    for name in CREDENTIAL_ENV_VARS:
        value = source.get(name, "").strip()
        if value:
            return value
    return None
