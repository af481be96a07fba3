import pytest

from livequiz.services.game import Leaderboard


def test_award_accumulates_per_participant():
    board = Leaderboard()
    awards = [('alice', 10), ('bob', 5), ('alice', 3), ('alice', 7), ('bob', 1)]
    for pid, points in awards:
        board.award(pid, points)
    assert board.score('alice') == 20
    assert board.score('bob') == 6
    assert board.score('nobody') == 0
    assert len(board) == 2


def test_award_rejects_non_positive_points():
    board = Leaderboard()
    with pytest.raises(ValueError):
        board.award('alice', 0)
    with pytest.raises(ValueError):
        board.award('alice', -5)
    assert len(board) == 0


def test_top_is_sorted_and_truncated():
    board = Leaderboard()
    for i in range(15):
        board.award(f'p{i}', i + 1)
    top = board.top(10)
    assert len(top) == 10
    scores = [entry.score for entry in top]
    assert scores == sorted(scores, reverse=True)
    assert top[0].participant_id == 'p14'
    assert len(board.top(50)) == 15
    assert board.top(0) == []


def test_ties_keep_first_appearance_order():
    board = Leaderboard()
    board.award('carol', 10)
    board.award('alice', 10)
    board.award('bob', 20)
    assert [e.participant_id for e in board.top()] == ['bob', 'carol', 'alice']


def test_reset_and_payload_shape():
    board = Leaderboard()
    board.award('alice', 10)
    assert [e.to_dict() for e in board.top()] == [{'participantId': 'alice', 'score': 10}]
    board.reset()
    assert board.top() == []
