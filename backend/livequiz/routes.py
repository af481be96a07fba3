from flask import Blueprint, current_app, jsonify, request

main = Blueprint('main', __name__)
game = Blueprint('game', __name__)


@main.route('/health')
def health():
    return 'OK', 200


@game.route('/state', methods=['GET'])
def get_game_state():
    """Returns the same snapshot a newly connected socket receives."""
    return jsonify(current_app.extensions['game'].snapshot())


@game.route('/questions', methods=['GET'])
def list_questions():
    return jsonify(current_app.extensions['game'].questions())


@game.route('/questions', methods=['POST'])
def add_question():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Question must be a JSON object'}), 400
    question = current_app.extensions['game'].add_question(data)
    return jsonify(question.to_dict()), 201
