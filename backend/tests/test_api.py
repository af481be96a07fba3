def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_data(as_text=True) == 'OK'


def test_state_snapshot(client):
    res = client.get('/api/game/state')
    assert res.status_code == 200
    assert res.get_json() == {
        'status': 'waiting',
        'question': None,
        'timeRemaining': 0,
        'leaderboard': [],
    }


def test_add_and_list_questions(client):
    res = client.post('/api/game/questions', json={'question': '2+2?', 'options': ['3', '4'], 'answer': '4'})
    assert res.status_code == 201
    assert res.get_json() == {'question': '2+2?', 'options': ['3', '4'], 'answer': '4'}
    res = client.get('/api/game/questions')
    assert res.status_code == 200
    assert res.get_json() == [{'question': '2+2?', 'options': ['3', '4'], 'answer': '4'}]


def test_add_question_rejects_non_object(client):
    res = client.post('/api/game/questions', json=['not', 'an', 'object'])
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_malformed_question_is_accepted(client):
    res = client.post('/api/game/questions', json={'question': 'Who?'})
    assert res.status_code == 201
    assert res.get_json()['answer'] is None
