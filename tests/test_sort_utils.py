import pytest

from app.core.exceptions import InvalidSortError, ValidationError
from app.utils.sort import resolve_sort_direction


@pytest.mark.parametrize(
    "token, expected",
    [(None, None), ("", None), ("asc", "asc"), ("desc", "desc")],
)
def test_resolve_sort_direction_accepts_known_tokens(token, expected):
    assert resolve_sort_direction(token) == expected


@pytest.mark.parametrize("token", ["ASC", "Desc", " desc", "rating", "up"])
def test_resolve_sort_direction_rejects_everything_else(token):
    with pytest.raises(InvalidSortError) as exc_info:
        resolve_sort_direction(token)
    # reported to clients as a bad request
    assert isinstance(exc_info.value, ValidationError)
