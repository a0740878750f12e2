"""
Formatters that turn GitHub webhook payloads into Misskey notes.

Each ``format_*`` function reads its payload defensively and returns a
NotificationMessage, or None when the event's action or state is not one
that gets announced. Text uses Misskey markup: ``?[label](url)`` for silent
links, ``$[spin ...]`` for animated emoji and ``<plain>`` to stop user text
from being parsed as markup.
"""

from collections.abc import Callable
from typing import Any

from src.core.models import EventType, NotificationMessage, Visibility
from src.integrations.github.statuses import FAILED_STATES

Payload = dict[str, Any]
Formatter = Callable[[Payload], NotificationMessage | None]

ISSUE_TITLES = {
    "opened": "💥 Issue opened",
    "closed": "💮 Issue closed",
    "reopened": "🔥 Issue reopened",
}

PULL_REQUEST_TITLES = {
    "opened": "📦 New Pull Request",
    "reopened": "🗿 Pull Request Reopened",
}

DISCUSSION_TITLES = {
    "created": "💭 Discussion opened",
    "closed": "💮 Discussion closed",
    "reopened": "🔥 Discussion reopened",
    "answered": "✅ Discussion marked answer",
}


def _section(payload: Payload, key: str) -> Payload:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _login(obj: Payload) -> str:
    return _section(obj, "user").get("login", "")


def _quoted(subject: str, title: str, author: str, body: str | None, url: str) -> str:
    return f'{subject} "{title}": {author} "<plain>{body or ""}</plain>"\n{url}'


def _commit_line(commit: Payload) -> str:
    short_sha = (commit.get("id") or "")[:7]
    summary = (commit.get("message") or "").split("\n")[0]
    return f"・[?[{short_sha}]({commit.get('url', '')})] {summary}"


def is_failed_status(payload: Payload) -> bool:
    """True for status events whose state is announced as a build failure."""
    return payload.get("state") in FAILED_STATES


def parent_commit_url(payload: Payload) -> str | None:
    """API URL of the first parent of a status event's commit, if the payload has one."""
    parents = _section(payload, "commit").get("parents") or []
    if not parents or not isinstance(parents[0], dict):
        return None
    return parents[0].get("url") or None


def format_status(payload: Payload, parent_state: str | None = None) -> NotificationMessage | None:
    """
    Announce a failed or errored build.

    Args:
        payload: The status event payload.
        parent_state: Latest status state of the parent commit, None if unknown.

    Returns:
        "still failed" when the parent was failing too, "build failed" otherwise,
        or None for non-failure states.
    """
    if not is_failed_status(payload):
        return None

    commit = _section(payload, "commit")
    message = _section(commit, "commit").get("message", "")
    link = f"[{message}]({commit.get('html_url', '')})"

    if parent_state in FAILED_STATES:
        return NotificationMessage(text=f"⚠️ **BUILD STILL FAILED** ⚠️: {link}")
    return NotificationMessage(text=f"🚨 **BUILD FAILED** 🚨: {link}")


def format_push(payload: Payload, branch: str = "develop") -> NotificationMessage | None:
    """List the commits pushed to the watched branch, newest first."""
    if payload.get("ref") != f"refs/heads/{branch}":
        return None

    pusher = _section(payload, "pusher").get("name", "")
    commits = [commit for commit in payload.get("commits") or [] if isinstance(commit, dict)]
    plural = "s" if len(commits) > 1 else ""

    lines = [f"🆕 Pushed by **{pusher}** with ?[{len(commits)} commit{plural}]({payload.get('compare', '')}):"]
    lines.append("\n".join(_commit_line(commit) for commit in reversed(commits)))
    return NotificationMessage(text="\n".join(lines))


def format_issues(payload: Payload) -> NotificationMessage | None:
    title = ISSUE_TITLES.get(payload.get("action", ""))
    if title is None:
        return None
    issue = _section(payload, "issue")
    return NotificationMessage(
        text=f'{title}: #{issue.get("number", "")} "{issue.get("title", "")}"\n{issue.get("html_url", "")}'
    )


def format_issue_comment(payload: Payload) -> NotificationMessage | None:
    if payload.get("action") != "created":
        return None
    issue = _section(payload, "issue")
    comment = _section(payload, "comment")
    return NotificationMessage(
        text=_quoted(
            "💬 Commented on",
            issue.get("title", ""),
            _login(comment),
            comment.get("body"),
            comment.get("html_url", ""),
        )
    )


def format_release(payload: Payload) -> NotificationMessage | None:
    if payload.get("action") != "published":
        return None
    release = _section(payload, "release")
    return NotificationMessage(
        text=f"🎁 **NEW RELEASE**: [{release.get('tag_name', '')}]({release.get('html_url', '')}) is out. Enjoy!"
    )


def format_watch(payload: Payload) -> NotificationMessage | None:
    sender = _section(payload, "sender")
    return NotificationMessage(
        text=f"$[spin ⭐️] Starred by ?[**{sender.get('login', '')}**]({sender.get('html_url', '')})",
        visibility=Visibility.PUBLIC,
    )


def format_fork(payload: Payload) -> NotificationMessage | None:
    sender = _section(payload, "sender")
    forkee = _section(payload, "forkee")
    return NotificationMessage(
        text=(
            f"$[spin.y 🍴] ?[Forked]({forkee.get('html_url', '')}) "
            f"by ?[**{sender.get('login', '')}**]({sender.get('html_url', '')})"
        )
    )


def format_pull_request(payload: Payload) -> NotificationMessage | None:
    """Opened, reopened, merged, or closed without merging."""
    action = payload.get("action")
    pr = _section(payload, "pull_request")

    if action == "closed":
        title = "💯 Pull Request Merged!" if pr.get("merged") else "🚫 Pull Request Closed"
    else:
        title = PULL_REQUEST_TITLES.get(action or "")
        if title is None:
            return None

    return NotificationMessage(text=f'{title}: "{pr.get("title", "")}"\n{pr.get("html_url", "")}')


def format_pull_request_review_comment(payload: Payload) -> NotificationMessage | None:
    if payload.get("action") != "created":
        return None
    pr = _section(payload, "pull_request")
    comment = _section(payload, "comment")
    return NotificationMessage(
        text=_quoted(
            "💬 Review commented on",
            pr.get("title", ""),
            _login(comment),
            comment.get("body"),
            comment.get("html_url", ""),
        )
    )


def format_pull_request_review(payload: Payload) -> NotificationMessage | None:
    # Approvals without a comment carry no body and are not worth a note
    review = _section(payload, "review")
    if not review.get("body"):
        return None
    if payload.get("action") != "submitted":
        return None
    pr = _section(payload, "pull_request")
    return NotificationMessage(
        text=_quoted(
            "👀 Review submitted:",
            pr.get("title", ""),
            _login(review),
            review["body"],
            review.get("html_url", ""),
        )
    )


def format_discussion(payload: Payload) -> NotificationMessage | None:
    action = payload.get("action", "")
    title = DISCUSSION_TITLES.get(action)
    if title is None:
        return None
    discussion = _section(payload, "discussion")
    url = discussion.get("answer_html_url" if action == "answered" else "html_url", "")
    return NotificationMessage(text=f'{title}: #{discussion.get("number", "")} "{discussion.get("title", "")}"\n{url}')


def format_discussion_comment(payload: Payload) -> NotificationMessage | None:
    if payload.get("action") != "created":
        return None
    discussion = _section(payload, "discussion")
    comment = _section(payload, "comment")
    return NotificationMessage(
        text=_quoted(
            "💬 Commented on",
            discussion.get("title", ""),
            _login(comment),
            comment.get("body"),
            comment.get("html_url", ""),
        )
    )


# Formatters that need nothing but the payload. Status and push take extra arguments.
FORMATTERS: dict[EventType, Formatter] = {
    EventType.ISSUES: format_issues,
    EventType.ISSUE_COMMENT: format_issue_comment,
    EventType.RELEASE: format_release,
    EventType.WATCH: format_watch,
    EventType.FORK: format_fork,
    EventType.PULL_REQUEST: format_pull_request,
    EventType.PULL_REQUEST_REVIEW_COMMENT: format_pull_request_review_comment,
    EventType.PULL_REQUEST_REVIEW: format_pull_request_review,
    EventType.DISCUSSION: format_discussion,
    EventType.DISCUSSION_COMMENT: format_discussion_comment,
}
