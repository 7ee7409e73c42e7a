import pytest

from slidegenius.json_extraction import JSONArrayNotFoundError, extract_json_array


def test_array_with_preamble_and_trailing_commentary():
    text = 'Sure! Here is your outline:\n[{"title": "A"}, {"title": "B"}]\nLet me know if you need changes.'
    assert extract_json_array(text) == [{"title": "A"}, {"title": "B"}]


def test_brackets_inside_strings_do_not_end_the_array():
    text = '[{"title": "Use [brackets] ] wisely", "content": "say \\"hi]\\""}] trailing ]'
    result = extract_json_array(text)
    assert result == [{"title": "Use [brackets] ] wisely", "content": 'say "hi]"'}]


def test_skips_bracketed_prose_before_the_real_array():
    text = "Note [draft]: see below\n```json\n[{\"title\": \"Real\"}]\n```"
    assert extract_json_array(text) == [{"title": "Real"}]


def test_nested_arrays_return_the_outer_array():
    assert extract_json_array("x [[1, 2], [3]] y") == [[1, 2], [3]]


def test_unclosed_array_fails():
    with pytest.raises(JSONArrayNotFoundError):
        extract_json_array('[{"title": "A"},')


def test_malformed_array_fails():
    with pytest.raises(JSONArrayNotFoundError):
        extract_json_array("[{'title': 'single quotes'}]")


@pytest.mark.parametrize("text", ["", "no json here", "{\"title\": \"object only\"}"])
def test_missing_array_fails(text):
    with pytest.raises(JSONArrayNotFoundError):
        extract_json_array(text)
