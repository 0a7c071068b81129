from app.dto.mappers import map_user, map_user_page
from app.repositories.interfaces import UserRow


def _row(id_: int, nickname: str, rating: float) -> UserRow:
    return UserRow(id=id_, name=nickname.title(), nickname=nickname, likes=1, viewers=2, rating=rating)


def test_map_user_copies_all_fields() -> None:
    dto = map_user(_row(7, "ann1", 0.5))

    assert dto.model_dump() == {
        "id": 7,
        "name": "Ann1",
        "nickname": "ann1",
        "likes": 1,
        "viewers": 2,
        "rating": 0.5,
    }


def test_map_user_page_sets_has_more() -> None:
    rows = [_row(1, "a", 0.5), _row(2, "b", 0.5)]

    page = map_user_page(rows, 5, limit=2, offset=0)
    assert page.total_count == 5
    assert page.has_more is True
    assert [u.nickname for u in page.data] == ["a", "b"]

    last = map_user_page(rows[:1], 5, limit=2, offset=4)
    assert last.has_more is False
