"""Unit tests for the merged course content sequence."""

from types import SimpleNamespace

from academy.services.shares.navigation import (
    build_content_sequence,
    find_neighbours,
    navigation_payload,
)


def item(id_, position, title=None):
    return SimpleNamespace(id=id_, position=position, title=title or str(id_))


class TestBuildContentSequence:
    def test_orders_by_position(self):
        sequence = build_content_sequence(
            chapters=[item("c2", 3), item("c1", 1)],
            quizzes=[item("q1", 2)],
            livestreams=[item("l1", 4)],
        )
        assert [(i.id, i.type) for i in sequence] == [
            ("c1", "chapter"),
            ("q1", "quiz"),
            ("c2", "chapter"),
            ("l1", "livestream"),
        ]

    def test_ties_go_chapter_then_quiz_then_livestream(self):
        sequence = build_content_sequence(
            chapters=[item("c", 1)], quizzes=[item("q", 1)], livestreams=[item("l", 1)]
        )
        assert [i.type for i in sequence] == ["chapter", "quiz", "livestream"]

    def test_same_type_ties_keep_input_order(self):
        sequence = build_content_sequence(chapters=[item("a", 1), item("b", 1)])
        assert [i.id for i in sequence] == ["a", "b"]

    def test_missing_position_counts_as_zero(self):
        sequence = build_content_sequence(chapters=[item("a", 1), item("b", None)])
        assert [i.id for i in sequence] == ["b", "a"]
        assert sequence[0].position == 0


class TestNeighbours:
    def setup_method(self):
        self.sequence = build_content_sequence(
            chapters=[item("c1", 1), item("c2", 3)], quizzes=[item("q1", 2)]
        )

    def test_middle_item(self):
        previous, nxt = find_neighbours(self.sequence, "q1", "quiz")
        assert previous.id == "c1"
        assert nxt.id == "c2"

    def test_edges(self):
        assert find_neighbours(self.sequence, "c1", "chapter")[0] is None
        assert find_neighbours(self.sequence, "c2", "chapter")[1] is None

    def test_type_must_match(self):
        assert find_neighbours(self.sequence, "q1", "chapter") == (None, None)

    def test_payload(self):
        payload = navigation_payload(self.sequence, "c1", "chapter")
        assert payload["previous"] is None
        assert payload["next"] == {"id": "q1", "type": "quiz", "position": 2, "title": "q1"}
