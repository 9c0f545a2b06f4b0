# ftl_backend/services/upload_service.py
import os
import uuid
from flask import current_app
from werkzeug.utils import secure_filename

from ..config import UPLOAD_SUBDIRS

UPLOAD_URL_PREFIX = '/uploads/'


class UploadError(ValueError):
    """Raised when an uploaded file is rejected."""


def ensure_upload_dirs(app):
    """Creates UPLOAD_FOLDER and its sub-folders if they don't exist."""
    upload_root = app.config['UPLOAD_FOLDER']
    for dir_path in [upload_root] + [os.path.join(upload_root, sub) for sub in UPLOAD_SUBDIRS]:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path, exist_ok=True)
            app.logger.info(f"Created directory: {dir_path}")


def get_file_extension(filename):
    if '.' in filename: return filename.rsplit('.', 1)[1].lower()
    return ''


def allowed_file(filename, allowed_extensions_config_key='ALLOWED_IMAGE_EXTENSIONS'):
    allowed_extensions = current_app.config.get(allowed_extensions_config_key, set())
    return '.' in filename and get_file_extension(filename) in allowed_extensions


def save_upload(file_storage, subdir, prefix, allowed_extensions_config_key='ALLOWED_IMAGE_EXTENSIONS'):
    """
    Saves an uploaded file under UPLOAD_FOLDER/<subdir> and returns its public URL
    (/uploads/<subdir>/<filename>). Returns None when no file was sent.
    """
    if file_storage is None or not file_storage.filename:
        return None
    if subdir not in UPLOAD_SUBDIRS:
        raise ValueError(f"Unknown upload folder '{subdir}'")
    if not allowed_file(file_storage.filename, allowed_extensions_config_key):
        allowed = ', '.join(sorted(current_app.config.get(allowed_extensions_config_key, set())))
        raise UploadError(f"File type not allowed. Allowed types: {allowed}")

    extension = get_file_extension(file_storage.filename)
    filename = secure_filename(f"{prefix}_{uuid.uuid4().hex[:8]}.{extension}")
    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], subdir)
    os.makedirs(folder, exist_ok=True)
    file_storage.save(os.path.join(folder, filename))
    current_app.logger.debug(f"Saved upload {filename} to {folder}")
    return f"{UPLOAD_URL_PREFIX}{subdir}/{filename}"


def delete_upload(file_url):
    """Removes a file previously returned by save_upload. Missing files are ignored."""
    if not file_url or not file_url.startswith(UPLOAD_URL_PREFIX):
        return False
    upload_root = os.path.abspath(current_app.config['UPLOAD_FOLDER'])
    full_path = os.path.abspath(os.path.join(upload_root, file_url[len(UPLOAD_URL_PREFIX):]))
    if not full_path.startswith(upload_root + os.sep):
        current_app.logger.error(f"Security violation: refusing to delete file outside upload folder: {full_path}")
        return False
    if os.path.isfile(full_path):
        try:
            os.remove(full_path)
            return True
        except OSError as e:
            current_app.logger.warning(f"Could not delete uploaded file {full_path}: {e}")
    return False
