"""
Supabase Storage utility for uploading and managing content images
"""
import io
import logging
import uuid

from flask import current_app, has_app_context
from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from dashboard.errors import UploadError

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = 'storage'
PUBLIC_PATH = '/storage/v1/object/public'


def _config(key, default=None):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def unique_object_name(filename):
    """Random identifier joined with the sanitized original filename."""
    return f"{uuid.uuid4().hex}_{secure_filename(filename or '') or 'upload'}"


def public_url(base_url, bucket, path):
    """
    Build the world-readable URL of a stored object.

    The base is not validated; an empty base yields a relative, broken URL.
    """
    if not base_url:
        logger.warning("Storage base URL not configured; image URLs will be broken")
    return f"{(base_url or '').rstrip('/')}{PUBLIC_PATH}/{bucket}/{path}"


def sniff_content_type(data):
    """Guess an image MIME type from its bytes"""
    try:
        img = Image.open(io.BytesIO(data))
        return Image.MIME.get(img.format, 'application/octet-stream')
    except (UnidentifiedImageError, OSError):
        return 'application/octet-stream'


def upload_image(client, file, folder, bucket=None, base_url=None):
    """
    Upload an image file to Supabase Storage

    Args:
        client: Supabase client
        file: The file from request.files (werkzeug FileStorage)
        folder: The folder name inside the bucket
        bucket: Bucket name, defaults to SUPABASE_STORAGE_BUCKET
        base_url: Public storage base, defaults to SUPABASE_STORAGE_URL

    Returns:
        Public URL of the stored object

    Raises:
        UploadError: if the storage write fails
    """
    bucket = bucket or _config('SUPABASE_STORAGE_BUCKET', DEFAULT_BUCKET)
    base_url = base_url if base_url is not None else _config('SUPABASE_STORAGE_URL')

    filename = unique_object_name(file.filename)
    file_path = f"{folder}/{filename}"

    try:
        binary_data = file.read()
        content_type = file.mimetype or sniff_content_type(binary_data)
        client.storage.from_(bucket).upload(
            file_path,
            binary_data,
            file_options={"content-type": content_type}
        )
    except Exception as e:
        logger.error(f"Error uploading image to Supabase: {str(e)}")
        raise UploadError(f"Failed to upload {file_path}") from e

    url = public_url(base_url, bucket, file_path)
    logger.info(f"Image uploaded to Supabase: {url}")
    return url


def object_path(image_url, bucket):
    """Path of an object inside ``bucket`` given its public URL, or None."""
    marker = f"{PUBLIC_PATH}/{bucket}/"
    if not image_url or marker not in image_url:
        return None
    return image_url.split(marker, 1)[1]


def delete_image(client, image_url, bucket=None):
    """
    Delete an image from Supabase Storage

    Args:
        client: Supabase client
        image_url: Public URL returned by upload_image
        bucket: Bucket name, defaults to SUPABASE_STORAGE_BUCKET

    Returns:
        Boolean indicating success
    """
    bucket = bucket or _config('SUPABASE_STORAGE_BUCKET', DEFAULT_BUCKET)
    file_path = object_path(image_url, bucket)
    if not file_path:
        return False

    try:
        client.storage.from_(bucket).remove([file_path])
        logger.info(f"Image deleted from Supabase: {file_path}")
        return True
    except Exception as e:
        logger.error(f"Error deleting image from Supabase: {str(e)}")
        return False
