from flask import Blueprint, jsonify

from rummy import rooms

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Rummikub duel server!'})


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(rooms)})
