"""Tests for reconciling local and remote extraction."""

from datetime import date

from nltask.integrations.extraction import normalize_extraction
from nltask.models.draft import DraftSource, Priority
from nltask.models.remote import RemoteExtraction
from nltask.parser.local import parse_local
from nltask.parser.merge import reconcile, union_names

SCENARIO = "Call @Mom tomorrow #family high priority"


class TestUnionNames:
    """Test case-insensitive name union."""

    def test_first_casing_kept(self):
        assert union_names(["Mom", "work"], ["mom", "Dad"], ["WORK"]) == ["Mom", "work", "Dad"]

    def test_empty(self):
        assert union_names() == []
        assert union_names([], []) == []


class TestReconcile:
    """Test reconcile()."""

    def test_remote_values_win(self, today, remote_call_result):
        local = parse_local(SCENARIO, today)

        draft = reconcile(local, remote_call_result, SCENARIO)

        assert draft.title == "Call high priority"
        assert draft.tag_names == ["family"]
        assert draft.people_names == ["Mom"]
        assert draft.priority == Priority.HIGH
        assert draft.due_date_phrase == "tomorrow"
        assert draft.due_date == date(2024, 5, 2)
        assert draft.source == DraftSource.MERGED

    def test_names_unioned_local_first(self, today):
        local = parse_local(SCENARIO, today)
        remote = RemoteExtraction(people=["mom", "Dad"], tags=["Family", "home"])

        draft = reconcile(local, remote, SCENARIO)

        assert draft.people_names == ["Mom", "Dad"]
        assert draft.tag_names == ["family", "home"]

    def test_local_fills_gaps(self, today):
        local = parse_local("Write report 30 minutes urgent due friday", today)

        draft = reconcile(local, RemoteExtraction(), "Write report 30 minutes urgent due friday")

        assert draft.title == local.title
        assert draft.priority == Priority.HIGH
        assert draft.effort_level == "30 minutes"
        assert draft.due_date_phrase == "due friday"
        assert draft.due_date == date(2024, 5, 3)

    def test_non_verbatim_remote_phrase_is_ignored(self, today):
        local = parse_local(SCENARIO, today)
        remote = RemoteExtraction(original_date_phrase="May 2nd")

        draft = reconcile(local, remote, SCENARIO)

        assert draft.due_date_phrase == "tomorrow"
        assert draft.due_date == date(2024, 5, 2)

    def test_remote_phrase_does_not_borrow_local_date(self, today):
        text = "Call Mom tomorrow or end of sprint"
        local = parse_local(text, today)
        remote = RemoteExtraction(original_date_phrase="end of sprint")

        draft = reconcile(local, remote, text)

        assert draft.due_date_phrase == "end of sprint"
        assert draft.due_date is None

    def test_unknown_remote_priority_falls_back(self, today):
        local = parse_local("not urgent chores", today)
        draft = reconcile(local, RemoteExtraction(priority="asap"), "not urgent chores")
        assert draft.priority == Priority.LOW

    def test_local_phrase_stripped_from_remote_title(self, today):
        text = "Call @Mom tomorrow #family"
        local = parse_local(text, today)
        remote = normalize_extraction(
            {"people": ["Mom"], "tags": ["family"], "originalDatePhrase": None}, text, is_live_typing=False
        )
        assert remote.task_title == "Call tomorrow"

        draft = reconcile(local, remote, text)

        assert draft.due_date_phrase == "tomorrow"
        assert draft.due_date == date(2024, 5, 2)
        assert draft.title == "Call"
        assert parse_local(draft.title, today).due_date_phrase is None

    def test_remote_phrase_inside_go_live_is_ignored(self, today):
        text = "Launch go live tomorrow"
        local = parse_local(text, today)
        remote = RemoteExtraction(original_date_phrase="tomorrow", due_date=date(2024, 5, 2),
                                  task_title="Launch go live")

        draft = reconcile(local, remote, text)

        assert draft.due_date_phrase is None
        assert draft.due_date is None
        assert draft.go_live_date == date(2024, 5, 2)
        assert draft.title == "Launch"
