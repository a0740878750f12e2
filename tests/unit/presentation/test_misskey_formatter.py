import pytest

from src.core.models import EventType, Visibility
from src.presentation.misskey_formatter import (
    FORMATTERS,
    format_discussion,
    format_discussion_comment,
    format_fork,
    format_issue_comment,
    format_issues,
    format_pull_request,
    format_pull_request_review,
    format_pull_request_review_comment,
    format_push,
    format_release,
    format_status,
    format_watch,
    parent_commit_url,
)

SENDER = {"login": "octocat", "html_url": "https://github.com/octocat"}


def _status(state: str) -> dict:
    return {
        "state": state,
        "commit": {
            "html_url": "https://github.com/o/r/commit/abc",
            "commit": {"message": "Bump deps"},
            "parents": [{"url": "https://api.github.com/repos/o/r/commits/parent"}],
        },
    }


def _commit(sha: str, message: str) -> dict:
    return {"id": sha, "url": f"https://github.com/o/r/commit/{sha}", "message": message}


def test_format_status_failure_default_variant():
    message = format_status(_status("failure"))
    assert message.text == "🚨 **BUILD FAILED** 🚨: [Bump deps](https://github.com/o/r/commit/abc)"
    assert message.visibility == Visibility.HOME


def test_format_status_still_failed_variant():
    message = format_status(_status("error"), parent_state="error")
    assert message.text == "⚠️ **BUILD STILL FAILED** ⚠️: [Bump deps](https://github.com/o/r/commit/abc)"


@pytest.mark.parametrize("state", ["success", "pending"])
def test_format_status_ignores_other_states(state):
    assert format_status(_status(state), parent_state="failure") is None


def test_parent_commit_url():
    assert parent_commit_url(_status("failure")) == "https://api.github.com/repos/o/r/commits/parent"
    assert parent_commit_url({"commit": {"parents": []}}) is None
    assert parent_commit_url({}) is None


def test_format_push_lists_commits_newest_first():
    payload = {
        "ref": "refs/heads/develop",
        "pusher": {"name": "syuilo"},
        "compare": "https://github.com/o/r/compare/a...c",
        "commits": [
            _commit("aaaaaaa1111", "First\n\nbody"),
            _commit("bbbbbbb2222", "Second"),
            _commit("ccccccc3333", "Third\nmore"),
        ],
    }

    message = format_push(payload)

    assert message.text == (
        "🆕 Pushed by **syuilo** with ?[3 commits](https://github.com/o/r/compare/a...c):\n"
        "・[?[ccccccc](https://github.com/o/r/commit/ccccccc3333)] Third\n"
        "・[?[bbbbbbb](https://github.com/o/r/commit/bbbbbbb2222)] Second\n"
        "・[?[aaaaaaa](https://github.com/o/r/commit/aaaaaaa1111)] First"
    )


def test_format_push_single_commit_is_singular():
    payload = {"ref": "refs/heads/develop", "pusher": {"name": "a"}, "compare": "c", "commits": [_commit("1234567", "x")]}
    assert "?[1 commit](c):" in format_push(payload).text


def test_format_push_does_not_mutate_payload_order():
    commits = [_commit("1111111", "one"), _commit("2222222", "two")]
    format_push({"ref": "refs/heads/develop", "pusher": {"name": "a"}, "compare": "c", "commits": commits})
    assert [c["id"] for c in commits] == ["1111111", "2222222"]


def test_format_push_ignores_other_branches():
    assert format_push({"ref": "refs/heads/main", "commits": []}) is None
    assert format_push({"ref": "refs/tags/v1.0.0", "commits": []}) is None


def test_format_push_custom_branch():
    assert format_push({"ref": "refs/heads/main", "pusher": {"name": "a"}, "commits": []}, branch="main") is not None


@pytest.mark.parametrize(
    ("action", "title"),
    [("opened", "💥 Issue opened"), ("closed", "💮 Issue closed"), ("reopened", "🔥 Issue reopened")],
)
def test_format_issues(action, title):
    payload = {"action": action, "issue": {"number": 42, "title": "Bug", "html_url": "https://github.com/o/r/issues/42"}}
    assert format_issues(payload).text == f'{title}: #42 "Bug"\nhttps://github.com/o/r/issues/42'


def test_format_issues_ignores_other_actions():
    assert format_issues({"action": "labeled", "issue": {}}) is None


def test_format_issue_comment_quotes_body_as_plain():
    payload = {
        "action": "created",
        "issue": {"title": "Bug"},
        "comment": {"user": {"login": "alice"}, "body": "@bob see #12", "html_url": "https://c/1"},
    }
    assert format_issue_comment(payload).text == '💬 Commented on "Bug": alice "<plain>@bob see #12</plain>"\nhttps://c/1'


def test_format_issue_comment_ignores_edits():
    assert format_issue_comment({"action": "edited"}) is None


def test_format_release():
    payload = {"action": "published", "release": {"tag_name": "13.0.0", "html_url": "https://r/13"}}
    assert format_release(payload).text == "🎁 **NEW RELEASE**: [13.0.0](https://r/13) is out. Enjoy!"
    assert format_release({**payload, "action": "created"}) is None


def test_format_watch_is_public():
    message = format_watch({"action": "started", "sender": SENDER})
    assert message.text == "$[spin ⭐️] Starred by ?[**octocat**](https://github.com/octocat)"
    assert message.visibility == Visibility.PUBLIC


def test_format_fork():
    message = format_fork({"sender": SENDER, "forkee": {"html_url": "https://github.com/octocat/r"}})
    assert message.text == "$[spin.y 🍴] ?[Forked](https://github.com/octocat/r) by ?[**octocat**](https://github.com/octocat)"
    assert message.visibility == Visibility.HOME


@pytest.mark.parametrize(
    ("action", "merged", "title"),
    [
        ("opened", False, "📦 New Pull Request"),
        ("reopened", False, "🗿 Pull Request Reopened"),
        ("closed", True, "💯 Pull Request Merged!"),
        ("closed", False, "🚫 Pull Request Closed"),
    ],
)
def test_format_pull_request(action, merged, title):
    payload = {"action": action, "pull_request": {"title": "Add X", "html_url": "https://p/1", "merged": merged}}
    assert format_pull_request(payload).text == f'{title}: "Add X"\nhttps://p/1'


def test_format_pull_request_ignores_synchronize():
    assert format_pull_request({"action": "synchronize", "pull_request": {}}) is None


def test_format_pull_request_review_comment():
    payload = {
        "action": "created",
        "pull_request": {"title": "Add X"},
        "comment": {"user": {"login": "bob"}, "body": "nit", "html_url": "https://p/1#r1"},
    }
    assert format_pull_request_review_comment(payload).text == (
        '💬 Review commented on "Add X": bob "<plain>nit</plain>"\nhttps://p/1#r1'
    )
    assert format_pull_request_review_comment({**payload, "action": "deleted"}) is None


def test_format_pull_request_review_with_body():
    payload = {
        "action": "submitted",
        "pull_request": {"title": "Add X"},
        "review": {"user": {"login": "carol"}, "body": "nice", "html_url": "https://p/1#review"},
    }
    assert format_pull_request_review(payload).text == (
        '👀 Review submitted: "Add X": carol "<plain>nice</plain>"\nhttps://p/1#review'
    )


@pytest.mark.parametrize("review", [{"body": ""}, {"body": None}, {}])
def test_format_pull_request_review_without_body_is_skipped(review):
    assert format_pull_request_review({"action": "submitted", "review": review}) is None


def test_format_pull_request_review_ignores_dismissed():
    assert format_pull_request_review({"action": "dismissed", "review": {"body": "nice"}}) is None


@pytest.mark.parametrize(
    ("action", "title", "url"),
    [
        ("created", "💭 Discussion opened", "https://d/5"),
        ("closed", "💮 Discussion closed", "https://d/5"),
        ("reopened", "🔥 Discussion reopened", "https://d/5"),
        ("answered", "✅ Discussion marked answer", "https://d/5#answer"),
    ],
)
def test_format_discussion(action, title, url):
    payload = {
        "action": action,
        "discussion": {"number": 5, "title": "Q", "html_url": "https://d/5", "answer_html_url": "https://d/5#answer"},
    }
    assert format_discussion(payload).text == f'{title}: #5 "Q"\n{url}'


def test_format_discussion_ignores_other_actions():
    assert format_discussion({"action": "pinned", "discussion": {}}) is None


def test_format_discussion_comment():
    payload = {
        "action": "created",
        "discussion": {"title": "Q"},
        "comment": {"user": {"login": "dave"}, "body": "A", "html_url": "https://d/5#c"},
    }
    assert format_discussion_comment(payload).text == '💬 Commented on "Q": dave "<plain>A</plain>"\nhttps://d/5#c'
    assert format_discussion_comment({**payload, "action": "edited"}) is None


def test_formatters_cover_payload_only_event_types():
    assert set(FORMATTERS) == set(EventType) - {EventType.STATUS, EventType.PUSH}
