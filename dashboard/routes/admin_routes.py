from flask import Blueprint, render_template, request, redirect, url_for, flash, abort, session, current_app, Response, stream_with_context
from flask_login import login_required
from dashboard.backend import backend
from dashboard.entities import ENTITIES
from dashboard.errors import FetchError, WriteError
from dashboard.forms import ConfirmDeleteForm
from dashboard.services.dialogs import FormDialog, DialogState
from dashboard.services.live_list import LiveList
from dashboard.utils.confirm import session_dialog, store_dialog
from dashboard.utils.decorators import admin_required, entity_required
from dashboard.utils.helpers import flash_errors, repository_for, dashboard_counts
import json
import queue

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

def _load_record(entity_type, record_id):
    """Fetch one record or abort; FetchError is reported and sends the user back to the list."""
    try:
        record = repository_for(entity_type).get(record_id)
    except FetchError as e:
        current_app.logger.error(f"Error loading {entity_type.label} {record_id}: {str(e)}")
        flash(f'Failed to load {entity_type.label}. Please try again.', 'error')
        return None, redirect(url_for('admin.list_records', entity=entity_type.key))
    if record is None:
        abort(404)
    return record, None

def _sse(event, data):
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"

@admin_bp.route('/')
@login_required
@admin_required
def dashboard():
    counts = dashboard_counts(ENTITIES.values())
    return render_template('admin/dashboard.html', entities=ENTITIES.values(), counts=counts)

@admin_bp.route('/<entity>')
@login_required
@admin_required
@entity_required
def list_records(entity_type):
    try:
        records = repository_for(entity_type).list()
    except FetchError as e:
        current_app.logger.error(f"Error fetching {entity_type.title.lower()}: {str(e)}")
        flash(f'Failed to load {entity_type.title.lower()}.', 'error')
        records = []

    return render_template('admin/list.html', entity=entity_type, records=records)

@admin_bp.route('/<entity>/add', methods=['GET', 'POST'])
@login_required
@admin_required
@entity_required
def add_record(entity_type):
    form = entity_type.form_class()

    if form.validate_on_submit():
        dialog = FormDialog(entity_type, repository_for(entity_type), backend.client)
        record = dialog.submit_add(form)

        if dialog.state is DialogState.SUCCESS:
            flash(f'{entity_type.label.capitalize()} "{entity_type.display_name(record or {})}" added successfully!', 'success')
            return redirect(url_for('admin.list_records', entity=entity_type.key))

        flash(dialog.error_message, 'error')

    flash_errors(form)
    return render_template('admin/form.html', form=form, entity=entity_type, record=None)

@admin_bp.route('/<entity>/<record_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
@entity_required
def edit_record(entity_type, record_id):
    record, failure = _load_record(entity_type, record_id)
    if failure:
        return failure

    form = entity_type.form_class(data=entity_type.to_form_data(record))

    if form.validate_on_submit():
        dialog = FormDialog(entity_type, repository_for(entity_type), backend.client)
        updated = dialog.submit_edit(record, form)

        if dialog.state is DialogState.SUCCESS:
            flash(f'{entity_type.label.capitalize()} "{entity_type.display_name(updated)}" updated successfully!', 'success')
            return redirect(url_for('admin.list_records', entity=entity_type.key))

        flash(dialog.error_message, 'error')

    flash_errors(form)
    return render_template('admin/form.html', form=form, entity=entity_type, record=record)

@admin_bp.route('/<entity>/<record_id>/delete', methods=['GET'])
@login_required
@admin_required
@entity_required
def confirm_delete(entity_type, record_id):
    record, failure = _load_record(entity_type, record_id)
    if failure:
        return failure

    dialog = session_dialog(session, entity_type.key)
    dialog.request({'id': record['id'], 'name': entity_type.display_name(record)})
    store_dialog(session, entity_type.key, dialog)

    return render_template('admin/confirm_delete.html', form=ConfirmDeleteForm(),
                           entity=entity_type, target=dialog.target)

@admin_bp.route('/<entity>/<record_id>/delete', methods=['POST'])
@login_required
@admin_required
@entity_required
def delete_record(entity_type, record_id):
    form = ConfirmDeleteForm()
    dialog = session_dialog(session, entity_type.key)

    if not dialog.is_open or str(dialog.target['id']) != str(record_id):
        # Deletion has to go through the confirmation page first
        return redirect(url_for('admin.confirm_delete', entity=entity_type.key, record_id=record_id))

    if not form.validate_on_submit() or form.cancel.data or not form.confirm.data:
        dialog.cancel()
        store_dialog(session, entity_type.key, dialog)
        return redirect(url_for('admin.list_records', entity=entity_type.key))

    def destroy(target):
        repository_for(entity_type).delete(target['id'])
        return target

    try:
        target = dialog.confirm(destroy)
        backend.remove_local(entity_type.table, target['id'])
        flash(f'{entity_type.label.capitalize()} "{target["name"]}" deleted.', 'success')
    except WriteError as e:
        current_app.logger.error(f"Error deleting {entity_type.label} {record_id}: {str(e)}")
        flash(f'Failed to delete {entity_type.label}. Please try again.', 'error')
    finally:
        store_dialog(session, entity_type.key, dialog)

    return redirect(url_for('admin.list_records', entity=entity_type.key))

@admin_bp.route('/<entity>/stream')
@login_required
@admin_required
@entity_required
def stream_records(entity_type):
    """Server-sent events: a snapshot of the list, then the patched list after every row change."""
    repository = repository_for(entity_type)
    realtime = backend.realtime
    heartbeat = current_app.config.get('STREAM_HEARTBEAT', 15)

    def generate():
        changes = queue.Queue()
        live = LiveList(repository, realtime, entity_type,
                        on_subscribe=backend.track, on_unsubscribe=backend.release)
        live.subscribe(lambda event_type, records: changes.put((event_type, records)))
        try:
            live.mount()
            yield _sse('snapshot', live.records)
            while True:
                try:
                    event_type, records = changes.get(timeout=heartbeat)
                except queue.Empty:
                    yield ': keep-alive\n\n'
                    continue
                yield _sse(event_type.lower(), records)
        finally:
            live.unmount()

    return Response(stream_with_context(generate()), mimetype='text/event-stream',
                    headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'})
