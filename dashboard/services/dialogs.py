"""
Add / edit dialogs for content records.

A dialog submission is: optional image upload, then one repository write,
then the success callback. The two network calls are not atomic.
"""
from enum import Enum

from flask import current_app

from dashboard.errors import UploadError, WriteError
from dashboard.utils.supabase_storage import upload_image, delete_image

UPLOAD_FAILED = 'Failed to upload image. Please try again.'


class DialogState(Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    SUCCESS = 'success'
    FAILED = 'failed'


class FormDialog:
    """Submission state machine shared by every entity's add and edit dialogs"""

    def __init__(self, entity, repository, client, on_success=None):
        self.entity = entity
        self.repository = repository
        self.client = client
        self.on_success = on_success
        self.state = DialogState.IDLE
        self.error_message = None
        self.record = None

    def reset(self):
        self.state = DialogState.IDLE
        self.error_message = None

    def _fail(self, message):
        self.state = DialogState.FAILED
        self.error_message = message
        return None

    def _upload(self, form):
        """Upload the attached image, if any. Returns the URL or None."""
        file = form.image.data
        if not file or not getattr(file, 'filename', None):
            return None
        return upload_image(self.client, file, self.entity.folder)

    def _discard_upload(self, image_url):
        if image_url and current_app.config.get('CLEANUP_ORPHANED_UPLOADS', True):
            if not delete_image(self.client, image_url):
                current_app.logger.warning(f"Orphaned upload left in storage: {image_url}")

    def submit_add(self, form):
        """
        Create a record from a validated form.

        Returns:
            The created record, or None when the dialog ended in FAILED
        """
        self.state = DialogState.SUBMITTING
        self.error_message = None

        try:
            image_url = self._upload(form)
        except UploadError as e:
            current_app.logger.error(f"Error uploading {self.entity.label} image: {str(e)}")
            return self._fail(UPLOAD_FAILED)

        fields = self.entity.to_fields(form)
        fields['image'] = image_url

        try:
            record = self.repository.insert(fields)
        except WriteError as e:
            current_app.logger.error(f"Error adding {self.entity.label}: {str(e)}")
            self._discard_upload(image_url)
            return self._fail(f'Failed to add {self.entity.label}. Please try again.')

        return self._succeed(record)

    def submit_edit(self, record, form):
        """
        Overwrite every editable field of ``record`` from a validated form.

        The stored image is kept unless a new file was chosen or the
        remove-image box was ticked.
        """
        self.state = DialogState.SUBMITTING
        self.error_message = None
        self.record = record

        try:
            new_image_url = self._upload(form)
        except UploadError as e:
            current_app.logger.error(f"Error uploading {self.entity.label} image: {str(e)}")
            return self._fail(UPLOAD_FAILED)

        fields = self.entity.to_fields(form)
        if new_image_url:
            fields['image'] = new_image_url
        elif form.remove_image.data:
            fields['image'] = None
        else:
            fields['image'] = record.get('image')

        try:
            updated = self.repository.update(record['id'], fields)
        except WriteError as e:
            current_app.logger.error(f"Error updating {self.entity.label} {record['id']}: {str(e)}")
            self._discard_upload(new_image_url)
            return self._fail(f'Failed to update {self.entity.label}. Please try again.')

        return self._succeed(updated if updated is not None else dict(record, **fields))

    def _succeed(self, record):
        self.state = DialogState.SUCCESS
        self.record = record
        if self.on_success:
            self.on_success(record)
        return record
