from livequiz.services.game import is_correct, normalize


def test_trailing_whitespace_and_case_are_ignored():
    assert is_correct("Paris ", "paris")
    assert is_correct("PARIS", "Paris")
    assert is_correct("  \tparis\n", "  Paris")


def test_near_misses_do_not_match():
    assert not is_correct("Pariss", "Paris")
    assert not is_correct("Par is", "Paris")
    assert not is_correct("the answer is paris", "Paris")


def test_missing_or_blank_answer_is_unwinnable():
    assert not is_correct("", None)
    assert not is_correct("anything", None)
    assert not is_correct("", "   ")


def test_non_string_input_never_matches():
    assert not is_correct(None, "4")
    assert not is_correct(4, "4")
    assert normalize(None) == ''
