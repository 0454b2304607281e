from flask import Blueprint, jsonify

from impostor import registry

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room_state(room_code):
    """
    Returns the public state of a room. The secret word and roles stay private.
    """
    room = registry.get_room(room_code)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    with room.lock:
        if room.closed:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(room.to_dict())
