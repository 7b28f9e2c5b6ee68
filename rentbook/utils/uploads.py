# rentbook/utils/uploads.py
import logging
import os
import secrets
from datetime import datetime

from flask import current_app
from werkzeug.utils import secure_filename

from ..errors import ValidationError

log = logging.getLogger(__name__)

# Multipart field name -> tenant column
DOCUMENT_FIELDS = {
    "aadhaar_file": "aadhaar_file",
    "pan_file": "pan_file",
    "photo_file": "photo",
}


def allowed_file(filename):
    allowed = current_app.config["ALLOWED_UPLOAD_EXTENSIONS"]
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in allowed


def upload_folder():
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    return folder


def check_uploads(files):
    errors = {}
    for field, file in files.items():
        if file and file.filename and not allowed_file(file.filename):
            errors[field] = "Only image and PDF files are allowed"
    if errors:
        raise ValidationError("Invalid upload", errors)


def save_upload(field, file):
    """Store an uploaded file and return its generated filename."""
    ext = os.path.splitext(secure_filename(file.filename))[1].lower()
    timestamp = datetime.now().strftime('%Y%m%d%H%M%S')
    filename = f"{field}-{timestamp}-{secrets.token_hex(4)}{ext}"
    file.save(os.path.join(upload_folder(), filename))
    log.info("Stored upload %s", filename)
    return filename


def save_documents(files):
    """Save every provided document; returns {tenant column: filename}."""
    saved = {}
    for field, column in DOCUMENT_FIELDS.items():
        file = files.get(field)
        if file and file.filename:
            saved[column] = save_upload(field, file)
    return saved


def remove_uploads(filenames):
    folder = current_app.config["UPLOAD_FOLDER"]
    for filename in filenames:
        try:
            os.remove(os.path.join(folder, filename))
        except FileNotFoundError:
            pass
