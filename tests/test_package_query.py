"""
Tests for package state queries — inventory and single-package classification.
"""

import pytest

from sunpkg.core.errors import InvocationFailure, QueryFailure
from sunpkg.core.models.package import Absent, Found, QueryFailed

from tests.samples import NOT_FOUND, pkginfo_block


class TestInstances:
    def test_lists_all_packages(self, mock_adapter, package_query, inventory_text):
        mock_adapter.set_output("pkginfo", inventory_text)
        records = package_query.instances()
        assert [r.name for r in records] == ["SUNWcsr", "SUNWesu"]
        assert all(r.provider == "sun" for r in records)
        assert records[1].ensure == "11.10.0,REV=2005.01.08.05.16"

    def test_runs_pkginfo_l(self, mock_adapter, package_query):
        package_query.instances()
        assert mock_adapter.commands == [["/usr/bin/pkginfo", "-l"]]

    def test_skips_blocks_without_name(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo", "VERSION: 1.0\n\n" + pkginfo_block("SUNWfoo"))
        assert [r.name for r in package_query.instances()] == ["SUNWfoo"]

    def test_empty_inventory(self, package_query):
        assert package_query.instances() == []

    def test_invocation_failure_is_fatal(self, mock_adapter, package_query):
        mock_adapter.set_failure("pkginfo", error="pkginfo: cannot open", return_code=2)
        with pytest.raises(InvocationFailure) as exc:
            package_query.instances()
        assert exc.value.return_code == 2
        assert "pkginfo: cannot open" in str(exc.value)


class TestInfo:
    def test_found(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", pkginfo_block("SUNWfoo", version="1.0"))
        result = package_query.info("SUNWfoo")
        assert isinstance(result, Found)
        assert result.record.name == "SUNWfoo"
        assert result.ensure == "1.0"

    def test_command_line(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", pkginfo_block("SUNWfoo"))
        package_query.info("SUNWfoo")
        ctx = mock_adapter.call_log[0]
        assert ctx.argv == ["/usr/bin/pkginfo", "-l", "SUNWfoo"]
        assert ctx.params["fail_on_nonzero"] is False
        assert ctx.params["combine_stderr"] is True

    def test_device_command_line(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo@/tmp/foo.pkg", pkginfo_block("SUNWfoo"))
        package_query.info("SUNWfoo", device="/tmp/foo.pkg")
        assert mock_adapter.commands == [
            ["/usr/bin/pkginfo", "-l", "-d", "/tmp/foo.pkg", "SUNWfoo"]
        ]

    def test_absent(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", NOT_FOUND.format(name="SUNWfoo"))
        assert isinstance(package_query.info("SUNWfoo"), Absent)

    def test_absent_with_no_prefix_phrasing(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:X", 'ERROR: No information for package "X"\n')
        assert isinstance(package_query.info("X"), Absent)

    def test_name_matched_literally(self, mock_adapter, package_query):
        # "." must not act as a wildcard
        mock_adapter.set_output("pkginfo:SUNW.oo", NOT_FOUND.format(name="SUNWfoo"))
        result = package_query.info("SUNW.oo")
        assert isinstance(result, QueryFailed)

    def test_name_with_regex_characters(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:gcc+*", NOT_FOUND.format(name="gcc+*"))
        assert isinstance(package_query.info("gcc+*"), Absent)

    def test_other_error_is_failure(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", "ERROR: disk full\n")
        assert package_query.info("SUNWfoo") == QueryFailed("disk full")

    def test_no_output_is_failure(self, package_query):
        assert package_query.info("SUNWfoo") == QueryFailed("No message")

    def test_first_block_used_when_several(self, mock_adapter, package_query, caplog):
        output = pkginfo_block("SUNWfoo", version="1.0") + "\n" + pkginfo_block("SUNWfoo.2", version="2.0")
        mock_adapter.set_output("pkginfo:SUNWfoo", output)
        with caplog.at_level("WARNING"):
            result = package_query.info("SUNWfoo")
        assert isinstance(result, Found)
        assert result.record.name == "SUNWfoo"
        assert result.ensure == "1.0"
        assert "returned 2 entries" in caplog.text

    def test_block_without_pkginst_is_failure(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", "VERSION: 1.0\n")
        assert isinstance(package_query.info("SUNWfoo"), QueryFailed)


class TestQueryAndLatest:
    def test_query_raises_on_failure(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", "ERROR: disk full\n")
        with pytest.raises(QueryFailure) as exc:
            package_query.query("SUNWfoo")
        assert exc.value.message == "disk full"
        assert "Unable to get information about package SUNWfoo" in str(exc.value)

    def test_query_absent_is_not_an_error(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo", NOT_FOUND.format(name="SUNWfoo"))
        assert isinstance(package_query.query("SUNWfoo"), Absent)

    def test_latest_reads_source(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo@/src", pkginfo_block("SUNWfoo", version="2.0"))
        assert package_query.latest("SUNWfoo", "/src") == "2.0"

    def test_latest_absent_at_source(self, mock_adapter, package_query):
        mock_adapter.set_output("pkginfo:SUNWfoo@/src", NOT_FOUND.format(name="SUNWfoo"))
        assert package_query.latest("SUNWfoo", "/src") is None
