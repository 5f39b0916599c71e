import re
from datetime import datetime, timezone

from app.services.articles.slug import generate_slug, slugify_title, to_base36

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert to_base36(1295) == "zz"


def test_slugify_title_normalizes():
    assert slugify_title("  Hello, World!  ") == "hello-world"
    assert slugify_title("Python -- 3.12  release") == "python-312-release"
    assert slugify_title("---") == ""
    assert slugify_title("学习笔记") == ""


def test_generated_slug_shape():
    for title in ["Intro to Python", "  Hello, World!  ", "---", "学习笔记", "", "C++ & Rust"]:
        slug = generate_slug(title)
        assert SLUG_RE.match(slug), slug
        assert not slug.startswith("-") and not slug.endswith("-")


def test_slug_suffix_from_time():
    now = datetime(2200, 1, 1, tzinfo=timezone.utc)
    ms = int(now.timestamp() * 1000)
    assert generate_slug("A B", now=now) == f"a-b-{to_base36(ms)}"
    # 同一毫秒再次生成时顺延
    assert generate_slug("A B", now=now) == f"a-b-{to_base36(ms + 1)}"


def test_same_title_gives_distinct_slugs():
    slugs = {generate_slug("Same Title") for _ in range(50)}
    assert len(slugs) == 50
    assert all(s.startswith("same-title-") for s in slugs)


def test_title_without_usable_chars_uses_suffix_only():
    slug = generate_slug("!!!")
    assert "-" not in slug
    assert SLUG_RE.match(slug)
