from __future__ import annotations

from discussions2site.query import build_query


def test_first_page_query_has_no_after_argument() -> None:
    query = build_query("honnip", "website")

    assert 'repository(owner: "honnip", name: "website")' in query
    assert "after:" not in query
    assert "first: 1," in query
    assert "orderBy: { field: CREATED_AT, direction: DESC }" in query


def test_cursor_resumes_after_given_position() -> None:
    query = build_query("honnip", "website", "Y3Vyc29yOnYyOpK5")

    assert 'after: "Y3Vyc29yOnYyOpK5"' in query


def test_query_requests_all_post_fields() -> None:
    query = build_query("owner", "repo", page_size=25, label_limit=5)

    for field_name in (
        "cursor",
        "number",
        "title",
        "createdAt",
        "updatedAt",
        "bodyHTML",
        "login",
        "avatarUrl",
        "category { name }",
        "labels(first: 5)",
        "description",
        "color",
        "hasNextPage",
    ):
        assert field_name in query
    assert "discussions(first: 25," in query


def test_cursor_is_quoted_as_string_literal() -> None:
    query = build_query("owner", "repo", 'abc"def')

    assert 'after: "abc\\"def"' in query
