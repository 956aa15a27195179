# tests/services/test_comment_forest.py
"""Tests for assembling a flat comment list into reply trees."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from nurture_forum.services.comments import build_comment_forest

BASE = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def _comment(comment_id, parent_id=None, user_id="uid-a", minute=0):
    return SimpleNamespace(
        id=comment_id,
        parent_id=parent_id,
        user_id=user_id,
        content=f"comment {comment_id}",
        created_at=BASE + timedelta(minutes=minute),
    )


def _build(comments, **overrides):
    options = {
        "viewer_id": "uid-viewer",
        "authors": {"uid-a": "amina"},
        "like_counts": {},
        "liked_by_viewer": set(),
    }
    options.update(overrides)
    return build_comment_forest(comments, **options)


def test_orphan_becomes_root() -> None:
    roots = _build([_comment(1), _comment(2, parent_id=1, minute=1), _comment(3, parent_id=99, minute=2)])

    assert [node.id for node in roots] == [1, 3]
    assert [node.id for node in roots[0].replies] == [2]
    assert roots[1].replies == []


def test_every_comment_appears_exactly_once() -> None:
    comments = [
        _comment(1),
        _comment(2, parent_id=1, minute=1),
        _comment(3, parent_id=2, minute=2),
        _comment(4, parent_id=1, minute=3),
        _comment(5, minute=4),
    ]
    roots = _build(comments)

    seen: list[int] = []
    stack = list(roots)
    while stack:
        node = stack.pop()
        seen.append(node.id)
        stack.extend(node.replies)
    assert sorted(seen) == [1, 2, 3, 4, 5]
    assert [node.id for node in roots[0].replies] == [2, 4]


def test_parent_created_later_is_not_used() -> None:
    # Out-of-order data: the child would otherwise be lost under a later parent.
    roots = _build([_comment(1, parent_id=2), _comment(2, minute=1)])
    assert [node.id for node in roots] == [1, 2]


def test_self_parent_is_root() -> None:
    roots = _build([_comment(1, parent_id=1)])
    assert [node.id for node in roots] == [1]


def test_node_fields() -> None:
    comments = [_comment(1, user_id="uid-viewer"), _comment(2, user_id="uid-a", minute=1)]
    roots = _build(comments, like_counts={2: 3}, liked_by_viewer={2})

    own, other = roots
    assert own.is_own_comment is True
    assert own.author == "Anonymous"
    assert own.total_likes == 0
    assert other.author == "amina"
    assert other.total_likes == 3
    assert other.is_liked_by_me is True
    assert other.timestamp == BASE + timedelta(minutes=1)


def test_empty_list() -> None:
    assert _build([]) == []
