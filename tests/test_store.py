from __future__ import annotations

from mentionkit.mentions.mention import Mention, MentionPayload
from mentionkit.mentions.ranges import TextRange
from mentionkit.mentions.store import MentionStore


def _store_over(text: str, *spans: tuple[int, int]) -> MentionStore:
    store = MentionStore()
    rejected = store.insert_existing(
        [(MentionPayload(TextRange(*span).slice(text)), TextRange(*span)) for span in spans], text
    )
    assert rejected == []
    return store


def test_insert_keeps_location_order() -> None:
    text = "@ann and @bob and @cy"
    store = _store_over(text, (18, 3), (0, 4), (9, 4))

    assert [m.range.location for m in store] == [0, 9, 18]
    assert [m.text for m in store] == ["@ann", "@bob", "@cy"]


def test_insert_existing_rejects_overlaps_and_bad_ranges() -> None:
    text = "@ann and @bob"
    store = MentionStore()
    first = (MentionPayload("ann"), TextRange(0, 4))
    overlapping = (MentionPayload("an"), TextRange(2, 4))
    empty = (MentionPayload("x"), TextRange(5, 0))
    outside = (MentionPayload("y"), TextRange(10, 10))

    rejected = store.insert_existing([first, overlapping, empty, outside], text)

    assert rejected == [overlapping, empty, outside]
    assert len(store) == 1


def test_add_replaces_range_and_shifts_following_mentions() -> None:
    text = "hi @bo and @cy"
    store = _store_over(text, (11, 3))

    new_range = store.add(MentionPayload("Bob"), TextRange(3, 3), len(text), append_trailing_space=True)

    assert new_range == TextRange(3, 3)
    assert [m.range for m in store] == [TextRange(3, 3), TextRange(12, 3)]
    assert store.mentions[0].text == "Bob"


def test_add_accepts_mapping_payloads_and_text_override() -> None:
    store = MentionStore()

    new_range = store.add({"name": "Bob"}, TextRange(0, 2), 2, text="@Bob")

    assert new_range == TextRange(0, 4)
    assert store.mentions[0].text == "@Bob"
    assert store.mentions[0].name == "Bob"


def test_add_ignores_ranges_outside_buffer() -> None:
    store = MentionStore()

    assert store.add(MentionPayload("Bob"), TextRange(3, 4), 5) is None
    assert len(store) == 0


def test_remove_is_by_identity() -> None:
    text = "@ann @ann"
    store = _store_over(text, (0, 4), (5, 4))
    twin = Mention(range=TextRange(5, 4), text="@ann")

    assert not store.remove(twin)
    assert store.remove(store.mentions[1])
    assert [m.range for m in store] == [TextRange(0, 4)]


def test_mention_being_edited_counts_boundary_characters() -> None:
    text = "x @bob y"
    store = _store_over(text, (2, 4))

    assert store.mention_being_edited(TextRange(5, 1)) is store.mentions[0]
    assert store.mention_being_edited(TextRange(1, 2)) is store.mentions[0]
    assert store.mention_being_edited(TextRange(4, 0)) is store.mentions[0]
    assert store.mention_being_edited(TextRange(2, 0)) is None
    assert store.mention_being_edited(TextRange(6, 0)) is None
    assert store.mention_being_edited(TextRange(6, 2)) is None


def test_mentions_being_edited_returns_every_overlap() -> None:
    text = "@a @b @c"
    store = _store_over(text, (0, 2), (3, 2), (6, 2))

    edited = store.mentions_being_edited(TextRange(1, 5))

    assert [m.text for m in edited] == ["@a", "@b"]


def test_adjust_all_shifts_and_drops() -> None:
    text = "@a @b @c"
    store = _store_over(text, (0, 2), (3, 2), (6, 2))

    dropped = store.adjust_all(3, 3, 1)

    assert [m.text for m in dropped] == ["@b"]
    assert [(m.text, m.range) for m in store] == [("@a", TextRange(0, 2)), ("@c", TextRange(4, 2))]


def test_adjusted_mentions_still_match_buffer() -> None:
    text = "hey @ann, meet @bob and @cy!"
    store = _store_over(text, (4, 4), (15, 4), (24, 3))
    edits = [(0, 0, "oh "), (12, 1, ""), (2, 2, "y"), (29, 0, " :)")]

    for location, old_length, new_text in edits:
        store.adjust_all(location, old_length, len(new_text))
        text = text[:location] + new_text + text[location + old_length:]

    assert len(store) == 3
    for mention in store:
        assert mention.range.slice(text) == mention.text
