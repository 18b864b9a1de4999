"""Tests for webhook payload translation."""

from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from github_memory.errors import StorageUnavailable, ValidationError
from github_memory.store import CommitRecord, GitHubMemoryStore, PullRequestRecord
from github_memory.webhook.translator import EventTranslator, commit_author


@pytest.fixture
def translator(store: GitHubMemoryStore) -> EventTranslator:
    return EventTranslator(store)


class TestPullRequestEvents:
    """Tests for pull_request events."""

    def test_indexes_pull_request(
        self, translator: EventTranslator, store: GitHubMemoryStore, pull_request_payload
    ) -> None:
        written = translator.handle("pull_request", pull_request_payload)

        assert written == 1
        pr = store.get_pull_request("octo/memory", 7)
        assert pr == PullRequestRecord(
            id=987654321,
            number=7,
            title="Add webhook ingestion",
            body="Stores PRs and commits for later search",
            state="open",
            author="octocat",
            repository="octo/memory",
            url="https://github.com/octo/memory/pull/7",
            created_at="2025-11-03T10:00:00Z",
            updated_at="2025-11-03T12:30:00Z",
        )

    def test_later_event_replaces_pull_request(
        self, translator: EventTranslator, store: GitHubMemoryStore, pull_request_payload
    ) -> None:
        translator.handle("pull_request", pull_request_payload)
        pull_request_payload["action"] = "closed"
        pull_request_payload["pull_request"].update(
            state="closed", body=None, updated_at="2025-11-04T08:00:00Z"
        )
        translator.handle("pull_request", pull_request_payload)

        pr = store.get_pull_request("octo/memory", 7)
        assert pr.state == "closed"
        assert pr.body is None
        assert len(store.search_pull_requests("")) == 1

    @pytest.mark.parametrize("user", [None, {}, {"login": ""}])
    def test_unknown_author(
        self, translator: EventTranslator, store: GitHubMemoryStore, pull_request_payload, user
    ) -> None:
        pull_request_payload["pull_request"]["user"] = user
        translator.handle("pull_request", pull_request_payload)

        assert store.get_pull_request("octo/memory", 7).author == "unknown"

    @pytest.mark.parametrize("missing", ["pull_request", "repository"])
    def test_missing_parts_are_a_no_op(self, pull_request_payload, missing) -> None:
        store = MagicMock()
        del pull_request_payload[missing]

        assert EventTranslator(store).handle("pull_request", pull_request_payload) == 0
        store.upsert_pull_request.assert_not_called()

    def test_malformed_pull_request_is_rejected(
        self, translator: EventTranslator, store: GitHubMemoryStore, pull_request_payload
    ) -> None:
        del pull_request_payload["pull_request"]["title"]

        with pytest.raises(ValidationError):
            translator.handle("pull_request", pull_request_payload)

        assert store.search_pull_requests("") == []

    def test_wrongly_typed_repository_is_rejected(self, translator: EventTranslator, pull_request_payload) -> None:
        pull_request_payload["repository"] = "octo/memory"

        with pytest.raises(ValidationError):
            translator.handle("pull_request", pull_request_payload)


class TestPushEvents:
    """Tests for push events."""

    def test_indexes_each_commit(
        self, translator: EventTranslator, store: GitHubMemoryStore, push_payload
    ) -> None:
        written = translator.handle("push", push_payload)

        assert written == 2
        first = store.get_commit("abc1234567")
        assert first == CommitRecord(
            id="abc1234567",
            message="Add store schema",
            author="octocat",
            repository="octo/memory",
            url="https://github.com/octo/memory/commit/abc1234567",
            timestamp="2025-11-03T09:00:00Z",
        )
        assert store.get_commit("def4567890").author == "Mona Lisa"

    def test_writes_in_list_order(self, push_payload) -> None:
        store = MagicMock()
        EventTranslator(store).handle("push", push_payload)

        written_ids = [c.args[0].id for c in store.upsert_commit.call_args_list]
        assert written_ids == ["abc1234567", "def4567890"]

    def test_duplicate_sha_in_batch_last_wins(
        self, translator: EventTranslator, store: GitHubMemoryStore, push_payload
    ) -> None:
        duplicate = dict(push_payload["commits"][0], message="Amended message")
        push_payload["commits"].append(duplicate)

        assert translator.handle("push", push_payload) == 3
        assert store.get_commit("abc1234567").message == "Amended message"

    def test_empty_commit_list(self, translator: EventTranslator, push_payload) -> None:
        push_payload["commits"] = []
        assert translator.handle("push", push_payload) == 0

    @pytest.mark.parametrize("missing", ["commits", "repository"])
    def test_missing_parts_are_a_no_op(self, push_payload, missing) -> None:
        store = MagicMock()
        del push_payload[missing]

        assert EventTranslator(store).handle("push", push_payload) == 0
        store.upsert_commit.assert_not_called()

    def test_commits_must_be_a_list(self, translator: EventTranslator, push_payload) -> None:
        push_payload["commits"] = {"id": "abc"}

        with pytest.raises(ValidationError):
            translator.handle("push", push_payload)

    def test_commit_entry_must_be_an_object(self, translator: EventTranslator, push_payload) -> None:
        push_payload["commits"].append("abc")

        with pytest.raises(ValidationError):
            translator.handle("push", push_payload)


class TestCommitAuthor:
    """Tests for commit author precedence."""

    def test_username_wins_over_name(self) -> None:
        assert commit_author({"author": {"username": "octocat", "name": "Octo Cat"}}) == "octocat"

    def test_name_when_no_username(self) -> None:
        assert commit_author({"author": {"name": "Octo Cat"}}) == "Octo Cat"

    def test_empty_username_falls_through(self) -> None:
        assert commit_author({"author": {"username": "", "name": "Octo Cat"}}) == "Octo Cat"

    @pytest.mark.parametrize("commit", [{}, {"author": None}, {"author": {}}, {"author": {"email": "a@b.c"}}])
    def test_unknown(self, commit) -> None:
        assert commit_author(commit) == "unknown"


class TestOtherEvents:
    """Tests for events that are not indexed."""

    @pytest.mark.parametrize("event", ["issues", "ping", "release", None])
    def test_ignored(self, event, pull_request_payload) -> None:
        store = MagicMock()

        assert EventTranslator(store).handle(event, pull_request_payload) == 0
        store.upsert_pull_request.assert_not_called()
        store.upsert_commit.assert_not_called()


def test_storage_failure_propagates(pull_request_payload) -> None:
    """Test that the translator does not swallow or retry store failures."""
    store = MagicMock()
    store.upsert_pull_request.side_effect = StorageUnavailable("disk full")

    with pytest.raises(StorageUnavailable):
        EventTranslator(store).handle("pull_request", pull_request_payload)

    assert store.upsert_pull_request.call_count == 1


def test_ignored_event_is_logged(pull_request_payload) -> None:
    with capture_logs() as logs:
        assert EventTranslator(MagicMock()).handle("ping", pull_request_payload) == 0

    assert logs == [{"event": "Ignoring event type", "github_event": "ping", "log_level": "info"}]
