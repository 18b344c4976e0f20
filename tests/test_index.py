from datetime import datetime
from pathlib import Path

import pytest

from quillsite.content import ContentItem, ContentStatus
from quillsite.index import build_index, tag_weight


def _item(
    slug: str,
    *,
    day: int = 1,
    layout: str = "post",
    tags: list[str] | None = None,
    status: ContentStatus = ContentStatus.PUBLIC,
) -> ContentItem:
    return ContentItem(
        source_path=Path(f"{slug}.md"),
        output_path=slug,
        markdown_body="Body",
        metadata={"title": slug.title(), "layout": layout},
        timestamp=datetime(2024, 1, day),
        status=status,
        tags=tags or [],
    )


def test_groups_public_items_by_layout_and_tag() -> None:
    items = [
        _item("beta", day=2, tags=["a", "b"]),
        _item("alpha", day=3, tags=["b"]),
        _item("about", layout="page"),
        _item("secret", tags=["a"], status=ContentStatus.DRAFT),
        _item("unlisted", tags=["b"], status=ContentStatus.HIDDEN),
    ]

    index = build_index(items)

    assert [item.output_path for item in index.by_layout["post"]] == ["alpha", "beta"]
    assert [item.output_path for item in index.by_layout["page"]] == ["about"]
    assert [item.output_path for item in index.by_tag["a"]] == ["beta"]
    assert [item.output_path for item in index.by_tag["b"]] == ["alpha", "beta"]


def test_index_is_read_only() -> None:
    index = build_index([_item("one", tags=["x"])])

    with pytest.raises(TypeError):
        index.by_tag["y"] = ()  # type: ignore[index]
    assert isinstance(index.by_tag["x"], tuple)


def test_recent_posts_excludes_pages_and_sorts_newest_first() -> None:
    index = build_index(
        [
            _item("old", day=1),
            _item("new", day=9, layout="article"),
            _item("mid", day=5),
            _item("about", day=20, layout="page"),
        ]
    )

    assert [item.output_path for item in index.recent_posts()] == ["new", "mid", "old"]


def test_tag_weights_use_inverted_log_scale() -> None:
    items = [_item(f"p{n}", tags=["common"]) for n in range(10)]
    items.append(_item("rare-one", tags=["rare", "common2"]))
    items.append(_item("rare-two", tags=["common2"]))

    weights = build_index(items).tag_weights

    assert weights["common"] == 1
    assert weights["rare"] == 5
    assert 1 < weights["common2"] < 5


def test_single_member_tags_get_a_valid_weight() -> None:
    weights = build_index([_item("solo", tags=["only"])]).tag_weights

    assert weights == {"only": 5}


@pytest.mark.parametrize("most_frequent", [1, 2, 3, 7, 50, 1000])
def test_tag_weight_is_bounded_and_monotonic(most_frequent: int) -> None:
    weights = [tag_weight(count, most_frequent) for count in range(1, most_frequent + 1)]

    assert all(1 <= weight <= 5 for weight in weights)
    assert all(later <= earlier for earlier, later in zip(weights, weights[1:]))


def test_tag_weight_respects_max_step() -> None:
    assert tag_weight(1, 100, max_step=3) == 3
    assert tag_weight(100, 100, max_step=3) == 1
