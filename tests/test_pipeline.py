"""Tests for the submission pipeline: remote refinement, fallback, AI exclusion."""

import pytest
from datetime import date

from nltask.integrations.errors import ApiError, InvalidResponse, MissingCredential, NetworkError
from nltask.models.draft import DraftSource, Priority
from nltask.models.remote import RemoteExtraction
from nltask.parser.pipeline import NaturalLanguageTaskParser, is_ai_excluded

SCENARIO = "Call @Mom tomorrow #family high priority"


class TestIsAIExcluded:
    """Test is_ai_excluded() function."""

    @pytest.mark.parametrize("text,expected", [
        (".Private task", True),
        ("..Very private", True),
        (" . Private task", True),
        ("Task.Private", False),
        ("", False),
        ("Normal task", False),
    ])
    def test_period_prefix(self, text, expected):
        assert is_ai_excluded(text) is expected


class TestParseForSubmission:
    """Test NaturalLanguageTaskParser.parse_for_submission."""

    def test_merged_when_remote_answers(self, today, remote_call_result, make_extractor):
        extractor = make_extractor(result=remote_call_result)
        parser = NaturalLanguageTaskParser(extractor=extractor, today=lambda: today)

        draft = parser.parse_for_submission(SCENARIO)

        assert draft.source == DraftSource.MERGED
        assert draft.title == "Call high priority"
        assert len(extractor.calls) == 1
        assert extractor.calls[0]["is_live_typing"] is False
        assert extractor.calls[0]["current_date"] == today

    @pytest.mark.parametrize("error", [
        InvalidResponse("I'm sorry"),
        NetworkError("timeout"),
        ApiError("boom", status_code=500),
        MissingCredential("no key"),
    ])
    def test_fallback_uses_raw_text_as_title(self, today, error, make_extractor):
        parser = NaturalLanguageTaskParser(extractor=make_extractor(error=error), today=lambda: today)

        draft = parser.parse_for_submission(SCENARIO)

        assert draft.title == SCENARIO
        assert draft.source == DraftSource.LOCAL
        assert draft.tag_names == ["family"]
        assert draft.people_names == ["Mom"]
        assert draft.priority == Priority.HIGH
        assert draft.due_date_phrase == "tomorrow"
        assert draft.due_date == date(2024, 5, 2)

    def test_ai_excluded_text_never_reaches_remote(self, today, make_extractor):
        extractor = make_extractor()
        parser = NaturalLanguageTaskParser(extractor=extractor, today=lambda: today)

        draft = parser.parse_for_submission(".Call @Doctor tomorrow")

        assert extractor.calls == []
        assert draft.people_names == ["Doctor"]
        assert draft.title == "Call"
        assert draft.source == DraftSource.LOCAL

    def test_no_extractor_is_local_only(self, today):
        parser = NaturalLanguageTaskParser(today=lambda: today)
        draft = parser.parse_for_submission(SCENARIO)
        assert draft.source == DraftSource.LOCAL
        assert draft.title == "Call high priority"

    def test_empty_text_skips_remote(self, today, make_extractor):
        extractor = make_extractor()
        parser = NaturalLanguageTaskParser(extractor=extractor, today=lambda: today)
        assert parser.parse_for_submission("   ").title == ""
        assert extractor.calls == []


class TestShouldRefineLive:
    """Test the live-typing gate on the parser."""

    def test_requires_extractor_and_mention(self, make_extractor):
        assert NaturalLanguageTaskParser(extractor=make_extractor()).should_refine_live("meet @Al")
        assert not NaturalLanguageTaskParser().should_refine_live("meet @Al")
        assert not NaturalLanguageTaskParser(extractor=make_extractor()).should_refine_live("meet Al")

    def test_ai_excluded_text_is_not_refined(self, make_extractor):
        assert not NaturalLanguageTaskParser(extractor=make_extractor()).should_refine_live(".meet @Al")


class TestDraftSource:
    """Drafts come from local extraction or from a merge with the remote."""

    def test_sources(self):
        assert [source.value for source in DraftSource] == ["local", "merged"]

    def test_remote_without_date_phrase_keeps_title_clean(self, today, make_extractor):
        extractor = make_extractor(result=RemoteExtraction(
            people=["Mom"], tags=["family"], task_title="Call tomorrow",
        ))
        parser = NaturalLanguageTaskParser(extractor=extractor, today=lambda: today)

        draft = parser.parse_for_submission("Call @Mom tomorrow #family")

        assert draft.source == DraftSource.MERGED
        assert draft.due_date_phrase == "tomorrow"
        assert draft.title == "Call"
