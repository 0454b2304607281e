from flask import Blueprint, jsonify

from impostor import registry

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Impostor game server!',
        'rooms': registry.count(),
    })
