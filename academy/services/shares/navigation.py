from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from academy.core.enum import ContentType

# chapter < quiz < livestream when positions are equal
_TYPE_ORDER = {
    ContentType.CHAPTER.value: 0,
    ContentType.QUIZ.value: 1,
    ContentType.LIVESTREAM.value: 2,
}


@dataclass(frozen=True)
class ContentItem:
    id: str
    type: str
    position: int
    title: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "position": self.position,
            "title": self.title,
        }


def build_content_sequence(
    chapters: Iterable = (),
    quizzes: Iterable = (),
    livestreams: Iterable = (),
) -> list[ContentItem]:
    """
    Merge the course content into one list ordered by position.
    Objects only need `id`, `position` and `title` attributes.
    """
    items: list[tuple[int, int, int, ContentItem]] = []
    counter = 0
    for kind, rows in (
        (ContentType.CHAPTER.value, chapters),
        (ContentType.QUIZ.value, quizzes),
        (ContentType.LIVESTREAM.value, livestreams),
    ):
        for row in rows:
            position = row.position if row.position is not None else 0
            item = ContentItem(
                id=str(row.id), type=kind, position=position, title=row.title
            )
            items.append((position, _TYPE_ORDER[kind], counter, item))
            counter += 1

    items.sort(key=lambda t: (t[0], t[1], t[2]))
    return [t[3] for t in items]


def find_neighbours(
    sequence: Sequence[ContentItem], item_id, item_type: str
) -> tuple[Optional[ContentItem], Optional[ContentItem]]:
    """(previous, next) around the given item, None at either end."""
    target = str(item_id)
    for index, item in enumerate(sequence):
        if item.id == target and item.type == item_type:
            previous = sequence[index - 1] if index > 0 else None
            nxt = sequence[index + 1] if index + 1 < len(sequence) else None
            return previous, nxt
    return None, None


def navigation_payload(
    sequence: Sequence[ContentItem], item_id, item_type: str
) -> dict:
    previous, nxt = find_neighbours(sequence, item_id, item_type)
    return {
        "previous": previous.as_dict() if previous else None,
        "next": nxt.as_dict() if nxt else None,
    }
