from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from dashboard import csrf
from dashboard.backend import backend
from dashboard.entities import EVENTS
from dashboard.errors import BackendError
from dashboard.utils.helpers import repository_for
from dashboard.utils.supabase_storage import upload_image

api_bp = Blueprint('api', __name__, url_prefix='/api')
csrf.exempt(api_bp)

def _event_fields(source):
    """Event columns present in a form or JSON body; blank date/time become null."""
    fields = {}
    for name in EVENTS.fields:
        if name in source:
            value = source.get(name)
            if name in ('date', 'time') and not value:
                value = None
            fields[name] = value
    return fields

@api_bp.route('/events', methods=['GET'])
@login_required
def list_events():
    try:
        return jsonify(repository_for(EVENTS).list())
    except BackendError as e:
        current_app.logger.error(f"Error fetching events: {str(e)}")
        return jsonify({'error': 'Failed to fetch events'}), 500

@api_bp.route('/events', methods=['POST'])
@login_required
def create_event():
    try:
        fields = _event_fields(request.form)
        image = request.files.get('image')
        fields['image'] = None
        if image and image.filename:
            fields['image'] = upload_image(backend.client, image, EVENTS.folder)

        record = repository_for(EVENTS).insert(fields)
        return jsonify(record), 201
    except BackendError as e:
        current_app.logger.error(f"Error creating event: {str(e)}")
        return jsonify({'error': 'Failed to create event'}), 500

@api_bp.route('/events', methods=['PUT'])
@login_required
def update_event():
    payload = request.get_json(silent=True) or {}
    event_id = payload.pop('id', None)
    if event_id is None:
        return jsonify({'error': 'Event id is required'}), 400

    fields = _event_fields(payload)
    if 'image' in payload:
        fields['image'] = payload['image'] or None

    try:
        record = repository_for(EVENTS).update(event_id, fields)
        return jsonify(record)
    except BackendError as e:
        current_app.logger.error(f"Error updating event {event_id}: {str(e)}")
        return jsonify({'error': 'Failed to update event'}), 500

@api_bp.route('/events', methods=['DELETE'])
@login_required
def delete_event():
    payload = request.get_json(silent=True) or {}
    event_id = payload.get('id')
    if event_id is None:
        return jsonify({'error': 'Event id is required'}), 400

    try:
        repository_for(EVENTS).delete(event_id)
        return jsonify({'message': 'Event deleted successfully'})
    except BackendError as e:
        current_app.logger.error(f"Error deleting event {event_id}: {str(e)}")
        return jsonify({'error': 'Failed to delete event'}), 500
