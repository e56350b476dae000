"""Tests for the Gerrit changes query and patchset ref resolution."""

from pathlib import Path

import httpx
import pytest

from solanohook_core.errors import GerritQueryError, MissingPatchset
from solanohook_core.gerrit.changes import RefResolver, decode_gerrit_json, find_revision_ref

GERRIT = "https://gerrit.example.com"
CHANGE_ID = "abcedfegg"
FIXTURE = (Path(__file__).parent / "fixtures" / "gerrit-changes.json").read_text()


def _resolver(handler, prefix=GERRIT):
    return RefResolver(prefix, timeout=5, transport=httpx.MockTransport(handler))


def _serve(body, status=200, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, text=body)

    return handler


class TestDecodeGerritJson:
    def test_strips_xssi_prefix(self):
        assert decode_gerrit_json(')]}\'\n[{"_number": 1}]') == [{"_number": 1}]

    def test_missing_prefix_raises(self):
        with pytest.raises(GerritQueryError, match="prefix"):
            decode_gerrit_json('[{"_number": 1}]')

    def test_invalid_json_raises(self):
        with pytest.raises(GerritQueryError, match="not valid JSON"):
            decode_gerrit_json(")]}'\n[{")

    def test_decodes_fixture(self):
        changes = decode_gerrit_json(FIXTURE)
        assert len(changes) == 2
        assert changes[1]["_number"] == 2


class TestFindRevisionRef:
    def test_scans_all_entries(self):
        changes = [
            {"revisions": {"aaa": {"_number": 1, "ref": "refs/changes/01/1/1"}}},
            {"revisions": {"bbb": {"_number": 2, "ref": "refs/changes/02/2/2"}}},
        ]
        assert find_revision_ref(changes, 2) == "refs/changes/02/2/2"

    def test_first_match_wins(self):
        changes = [
            {"revisions": {"aaa": {"_number": 1, "ref": "refs/changes/01/1/1"}}},
            {"revisions": {"bbb": {"_number": 1, "ref": "refs/changes/02/2/1"}}},
        ]
        assert find_revision_ref(changes, 1) == "refs/changes/01/1/1"

    def test_returns_none_without_match(self):
        assert find_revision_ref([{"revisions": {"aaa": {"_number": 1, "ref": "refs/changes/01/1/1"}}}], 3) is None

    def test_empty_result(self):
        assert find_revision_ref([], 1) is None

    def test_skips_malformed_entries(self):
        changes = [
            "not a change",
            {"revisions": None},
            {"revisions": ["aaa"]},
            {"revisions": {"aaa": {"_number": 1}}},
            {"revisions": {"bbb": {"_number": 1, "ref": "refs/changes/02/2/1"}}},
        ]
        assert find_revision_ref(changes, 1) == "refs/changes/02/2/1"

    def test_string_patchset_number_does_not_match(self):
        changes = [{"revisions": {"aaa": {"_number": 1, "ref": "refs/changes/01/1/1"}}}]
        assert find_revision_ref(changes, "1") is None


class TestRefResolver:
    def test_queries_for_refs_with_a_matching_patchset(self):
        seen = []
        ref = _resolver(_serve(FIXTURE, seen=seen)).resolve(CHANGE_ID, 1)

        assert ref == "refs/changes/02/2/1"
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "gerrit.example.com"
        assert request.url.path == "/changes/"
        assert request.url.params.get("q") == CHANGE_ID
        assert request.url.params.get_list("o") == ["ALL_REVISIONS", "DOWNLOAD_COMMANDS"]

    def test_resolves_later_patchset(self):
        assert _resolver(_serve(FIXTURE)).resolve(CHANGE_ID, 2) == "refs/changes/02/2/2"

    def test_handles_refs_without_a_matching_patchset(self):
        with pytest.raises(MissingPatchset) as exc_info:
            _resolver(_serve(FIXTURE)).resolve(CHANGE_ID, 3)
        assert exc_info.value.change_id == CHANGE_ID
        assert exc_info.value.patchset_number == 3

    def test_empty_query_result_is_missing_patchset(self):
        with pytest.raises(MissingPatchset):
            _resolver(_serve(")]}'\n[]")).resolve(CHANGE_ID, 1)

    def test_trailing_slash_on_prefix(self):
        seen = []
        _resolver(_serve(FIXTURE, seen=seen), prefix=GERRIT + "/").resolve(CHANGE_ID, 1)
        assert seen[0].url.path == "/changes/"

    def test_prefix_path_kept(self):
        seen = []
        _resolver(_serve(FIXTURE, seen=seen), prefix=GERRIT + "/r").resolve(CHANGE_ID, 1)
        assert seen[0].url.path == "/r/changes/"

    def test_http_error_status_raises_query_error(self):
        with pytest.raises(GerritQueryError):
            _resolver(_serve("Not found", status=404)).resolve(CHANGE_ID, 1)

    def test_transport_error_raises_query_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GerritQueryError, match="connection refused"):
            _resolver(handler).resolve(CHANGE_ID, 1)

    def test_timeout_raises_query_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(GerritQueryError):
            _resolver(handler).resolve(CHANGE_ID, 1)

    def test_missing_prefix_raises_query_error(self):
        with pytest.raises(GerritQueryError):
            _resolver(_serve('[{"revisions": {}}]')).resolve(CHANGE_ID, 1)

    def test_non_list_response_raises_query_error(self):
        with pytest.raises(GerritQueryError, match="expected a list"):
            _resolver(_serve(")]}'\n{}")).resolve(CHANGE_ID, 1)

    def test_query_returns_decoded_changes(self):
        changes = _resolver(_serve(FIXTURE)).query(CHANGE_ID)
        assert [c["_number"] for c in changes] == [1, 2]
