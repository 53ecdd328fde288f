"""Tests for the content checksum."""

from content_versioning.versioning.hashing import (
    calculate_hash,
    canonical_json,
    hashable_content,
    rolling_hash,
)


def test_known_values():
    assert calculate_hash({}) == "31e"
    assert calculate_hash({"a": 1}) == "numd4y"
    assert calculate_hash({"a": 1, "b": 2}) == "kz8hg0"


def test_spring_issue_value():
    doc = {"title": "Spring Issue", "id": "news-1", "isPublished": False}
    assert calculate_hash(doc) == "jjjd2v"


def test_bookkeeping_fields_ignored():
    base = {"id": "news-1", "title": "Spring Issue"}
    with_bookkeeping = {
        **base,
        "versioning": {"currentVersion": 7, "currentHash": "x", "branch": "draft"},
        "updatedAt": "2024-03-01T00:00:00+00:00",
        "updatedBy": "u9",
    }
    assert calculate_hash(with_bookkeeping) == calculate_hash(base)


def test_created_fields_are_content():
    base = {"id": "news-1", "title": "Spring Issue"}
    assert calculate_hash({**base, "createdBy": "u1"}) != calculate_hash(base)


def test_top_level_order_independent():
    a = {"title": "Spring Issue", "id": "news-1", "tags": ["garden"], "year": 2024}
    b = {"year": 2024, "tags": ["garden"], "id": "news-1", "title": "Spring Issue"}
    assert calculate_hash(a) == calculate_hash(b)


def test_deterministic():
    doc = {"id": "news-1", "title": "Spring Issue", "meta": {"pages": 12}}
    assert calculate_hash(doc) == calculate_hash(dict(doc))


def test_distinct_content_distinct_hash():
    corpus = [
        {"id": "news-1", "title": "Spring Issue"},
        {"id": "news-1", "title": "Summer Issue"},
        {"id": "news-2", "title": "Spring Issue"},
        {"id": "news-1", "title": "Spring Issue", "isPublished": True},
        {"id": "news-1", "title": "Spring Issue", "isPublished": False},
        {"id": "news-1", "title": "Spring Issue", "tags": ["a", "b"]},
        {"id": "news-1", "title": "Spring Issue", "tags": ["b", "a"]},
        {"id": "news-1", "title": "Spring Issue", "pages": 12},
        {"id": "news-1", "title": "Spring Issue", "pages": 13},
        {"id": "news-1", "title": "Spring Issue", "meta": {"author": "Board"}},
    ]
    hashes = [calculate_hash(doc) for doc in corpus]
    assert len(set(hashes)) == len(corpus)


def test_hash_is_base36_text():
    value = calculate_hash({"id": "news-1", "body": "ünïcödé ✓ 🙂"})
    assert value
    assert set(value) <= set("0123456789abcdefghijklmnopqrstuvwxyz")


def test_rolling_hash_counts_utf16_units():
    # A character outside the BMP is two UTF-16 code units (a surrogate pair)
    assert rolling_hash("🙂") == 0xD83D * 31 + 0xDE42


def test_rolling_hash_wraps_to_signed_32_bit():
    h = rolling_hash("x" * 50)
    assert -(2**31) <= h < 2**31


def test_hashable_content_sorts_and_strips():
    content = {"b": 1, "updatedBy": "u1", "a": 2, "versioning": {}}
    assert list(hashable_content(content)) == ["a", "b"]


def test_canonical_json_compact():
    assert canonical_json({"a": [1, None, True]}) == '{"a":[1,null,true]}'
    assert canonical_json({"b": 1, "a": 2}, sort_keys=True) == '{"a":2,"b":1}'


def test_canonical_json_renders_numbers_like_json_stringify():
    assert canonical_json({"a": 1.0, "b": [2.5, -3.0]}) == '{"a":1,"b":[2.5,-3]}'
    assert canonical_json([float("nan"), float("inf")]) == "[null,null]"


def test_integral_float_hashes_like_int():
    assert calculate_hash({"pageCount": 8.0}) == calculate_hash({"pageCount": 8})
