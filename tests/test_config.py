"""
Tests for manifest loading — sunpkg.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from sunpkg.core.config.loader import ConfigError, find_manifest_file, load_manifest


@pytest.fixture
def manifest_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        tools:
          pkginfo: /opt/bin/pkginfo
        defaults:
          adminfile: /etc/sunpkg/admin
          source: /var/spool/pkg
        packages:
          - name: SUNWfoo
            ensure: latest
          - name: SUNWbar
            ensure: absent
            adminfile: /etc/sunpkg/admin-rm
          - SUNWbaz
    """)
    path = tmp_path / "sunpkg.yml"
    path.write_text(content)
    return path


class TestLoadManifest:
    def test_tools(self, manifest_yml):
        m = load_manifest(manifest_yml)
        assert m.tools.pkginfo == "/opt/bin/pkginfo"
        assert m.tools.pkgadd == "/usr/sbin/pkgadd"

    def test_defaults_merged(self, manifest_yml):
        m = load_manifest(manifest_yml)
        foo = m.get_package("SUNWfoo")
        assert foo.adminfile == "/etc/sunpkg/admin"
        assert foo.source == "/var/spool/pkg"
        assert foo.ensure == "latest"

    def test_entry_overrides_defaults(self, manifest_yml):
        bar = load_manifest(manifest_yml).get_package("SUNWbar")
        assert bar.adminfile == "/etc/sunpkg/admin-rm"

    def test_bare_name_entry(self, manifest_yml):
        baz = load_manifest(manifest_yml).get_package("SUNWbaz")
        assert baz.ensure == "present"

    def test_get_missing_package(self, manifest_yml):
        assert load_manifest(manifest_yml).get_package("nope") is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("")
        m = load_manifest(path)
        assert m.packages == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_manifest(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_manifest(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_manifest(path)

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages:\n  - ensure: latest\n")
        with pytest.raises(ConfigError, match="Invalid manifest"):
            load_manifest(path)

    def test_duplicate_package_rejected(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages:\n  - SUNWfoo\n  - name: SUNWfoo\n    ensure: absent\n")
        with pytest.raises(ConfigError, match="declared more than once"):
            load_manifest(path)

    def test_empty_ensure_rejected(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages:\n  - name: SUNWfoo\n    ensure:\n")
        with pytest.raises(ConfigError, match="ensure must not be empty"):
            load_manifest(path)

    def test_unquoted_version_rejected(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages:\n  - name: SUNWfoo\n    ensure: 1.10\n")
        with pytest.raises(ConfigError, match="must be quoted"):
            load_manifest(path)

    def test_quoted_version_kept(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages:\n  - name: SUNWfoo\n    ensure: \"1.10\"\n")
        assert load_manifest(path).get_package("SUNWfoo").ensure == "1.10"

    def test_packages_must_be_list(self, tmp_path):
        path = tmp_path / "sunpkg.yml"
        path.write_text("packages: SUNWfoo\n")
        with pytest.raises(ConfigError):
            load_manifest(path)

    def test_search_fails_cleanly(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No sunpkg.yml"):
            load_manifest()


class TestFindManifestFile:
    def test_walks_up(self, manifest_yml):
        nested = manifest_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_manifest_file(nested) == manifest_yml.resolve()

    def test_not_found(self, tmp_path):
        assert find_manifest_file(tmp_path) is None
