import pytest

from football_stats.validators import validate_player_id, validate_team_id, validate_user_id


def test_team_id_is_stripped():
    assert validate_team_id(" 86 ") == "86"


@pytest.mark.parametrize("raw", [None, "", "abc", "-5", "8.6", "٣"])
def test_bad_ids_rejected(raw):
    with pytest.raises(ValueError):
        validate_team_id(raw)


def test_player_id():
    assert validate_player_id("44") == "44"


def test_user_id_is_int():
    assert validate_user_id("7") == 7
    with pytest.raises(ValueError):
        validate_user_id(None)
