"""Tests for rel.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from rel.core.config import (
    BuildTarget,
    Config,
    ReleaseOptions,
    credential_from_env,
    load_config,
    load_project_config,
)
from rel.core.result import Err, Ok


class TestDefaults:
    def test_single_windows_target(self) -> None:
        config = Config()
        assert config.targets == (
            BuildTarget(
                triple="x86_64-pc-windows-gnu",
                archive="zip",
                toolchain="stable",
                upload_mode="none",
            ),
        )
        assert config.targets[0].is_windows

    def test_manifest_and_field(self) -> None:
        config = Config()
        assert config.manifest == "Cargo.toml"
        assert config.version_field == "package.version"
        assert config.tag_prefix == ""

    def test_release_name(self) -> None:
        assert Config().format_release_name("2.0.0") == "Release 2.0.0"

    def test_release_options(self) -> None:
        assert Config().release == ReleaseOptions(draft=False, prerelease=False, body=None)


class TestFromDict:
    def test_empty_dict_is_defaults(self) -> None:
        assert Config.from_dict({}) == Config()

    def test_targets(self) -> None:
        config = Config.from_dict(
            {
                "targets": [
                    {"triple": "x86_64-unknown-linux-gnu", "archive": "tar.gz"},
                    {"triple": "aarch64-apple-darwin", "archive": "zip", "toolchain": "nightly"},
                ]
            }
        )
        assert [t.triple for t in config.targets] == [
            "x86_64-unknown-linux-gnu",
            "aarch64-apple-darwin",
        ]
        assert config.targets[0].archive == "tar.gz"
        assert config.targets[1].toolchain == "nightly"
        assert config.target("aarch64-apple-darwin") is config.targets[1]
        assert config.target("nope") is None

    def test_rejects_unknown_archive(self) -> None:
        with pytest.raises(ValueError, match="unsupported archive format"):
            Config.from_dict({"targets": [{"triple": "x86_64-pc-windows-gnu", "archive": "rar"}]})

    def test_rejects_upload_mode(self) -> None:
        with pytest.raises(ValueError, match="upload_mode"):
            Config.from_dict(
                {"targets": [{"triple": "x86_64-pc-windows-gnu", "upload_mode": "release"}]}
            )

    def test_rejects_bad_triple(self) -> None:
        with pytest.raises(ValueError, match="not a target triple"):
            Config.from_dict({"targets": [{"triple": "windows"}]})

    def test_rejects_empty_targets(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            Config.from_dict({"targets": []})

    def test_rejects_duplicate_targets(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            Config.from_dict(
                {"targets": [{"triple": "x86_64-pc-windows-gnu"}, {"triple": "x86_64-pc-windows-gnu"}]}
            )

    def test_release_name_needs_tag(self) -> None:
        with pytest.raises(ValueError, match="release_name"):
            Config.from_dict({"release_name": "Nightly"})

    @pytest.mark.parametrize(
        "template", ["Release {tag} ({date})", "Release {tag} {", "Release {tag} {0}", "{tag.name}"]
    )
    def test_release_name_rejects_unknown_placeholders(self, template: str) -> None:
        with pytest.raises(ValueError, match="not a valid template"):
            Config.from_dict({"release_name": template})

    def test_release_name_escaped_tag_is_not_a_placeholder(self) -> None:
        with pytest.raises(ValueError, match="must contain"):
            Config.from_dict({"release_name": "Release {{tag}}"})

    def test_release_name_allows_escaped_braces(self) -> None:
        config = Config.from_dict({"release_name": "{{nightly}} {tag}"})
        assert config.format_release_name("2.0.0") == "{nightly} 2.0.0"

    def test_two_component_triple(self) -> None:
        config = Config.from_dict({"targets": [{"triple": "wasm32-wasip1", "archive": "tar.gz"}]})
        assert config.targets[0].triple == "wasm32-wasip1"
        assert not config.targets[0].is_windows

    def test_release_table(self) -> None:
        config = Config.from_dict({"release": {"draft": True, "body": "Binaries below."}})
        assert config.release.draft is True
        assert config.release.prerelease is False
        assert config.release.body == "Binaries below."

    def test_tag_prefix(self) -> None:
        assert Config.from_dict({"tag_prefix": "v"}).tag_prefix == "v"


class TestLoadConfig:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "rel.toml"
        path.write_text(
            'tag_prefix = "v"\nrepo = "owner/crate"\n\n'
            '[[targets]]\ntriple = "x86_64-unknown-linux-musl"\narchive = "tar.xz"\n',
            encoding="utf-8",
        )
        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.repo == "owner/crate"
        assert result.value.targets[0].archive == "tar.xz"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "rel.toml"
        path.write_text("targets = [", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "rel.toml"
        path.write_text('[[targets]]\ntriple = "x86_64-pc-windows-gnu"\narchive = "7z"\n')
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid config" in result.error.message

    def test_targets_table_instead_of_array(self, tmp_path: Path) -> None:
        path = tmp_path / "rel.toml"
        path.write_text('[targets]\ntriple = "x86_64-unknown-linux-gnu"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "array of tables" in result.error.message

    def test_bad_release_name_template(self, tmp_path: Path) -> None:
        path = tmp_path / "rel.toml"
        path.write_text('release_name = "Release {tag} ({date})"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "release_name" in result.error.message

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message


class TestLoadProjectConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        assert load_project_config(tmp_path) == Ok(Config())

    def test_reads_rel_toml(self, tmp_path: Path) -> None:
        (tmp_path / "rel.toml").write_text('remote = "upstream"\n', encoding="utf-8")
        result = load_project_config(tmp_path)
        assert isinstance(result, Ok)
        assert result.value.remote == "upstream"

    def test_explicit_file_must_exist(self, tmp_path: Path) -> None:
        result = load_project_config(tmp_path, tmp_path / "other.toml")
        assert isinstance(result, Err)


class TestCredential:
    def test_prefers_github_token(self) -> None:
        assert credential_from_env({"GITHUB_TOKEN": "a", "GH_TOKEN": "b"}) == "a"

    def test_falls_back_to_gh_token(self) -> None:
        assert credential_from_env({"GITHUB_TOKEN": "  ", "GH_TOKEN": "b"}) == "b"

    def test_none(self) -> None:
        assert credential_from_env({}) is None
