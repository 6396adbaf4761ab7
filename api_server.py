#!/usr/bin/env python3
"""
Image Processing API Server
Each session owns an alias table; every image operation has its own
endpoint-driven step, and results can be fetched as PNG or base64.
"""

import os
import logging
import uuid
import base64
from pathlib import Path
from typing import Dict
from io import BytesIO
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename
import numpy as np
from PIL import Image as PILImage

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.errors import (
    ImageNotFoundError,
    ImageProcessingError,
    InvalidImageNameError,
    UnknownOperationError,
)
from models.pixel_buffer import PixelBuffer
from pipeline.image_operations import ImageOperations
from repositories.alias_repository import ImageAliasRepository
from services.image_service import ImageService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "data/temp_uploads")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")) * 1024 * 1024

app.config['UPLOAD_FOLDER'] = UPLOAD_FOLDER
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
image_service = ImageService()
operations = ImageOperations(image_service=image_service)

logger = logging.getLogger(__name__)

# Session storage: session id -> alias table
sessions: Dict[str, ImageAliasRepository] = {}


def get_or_create_session(session_id: str = None) -> str:
    """Get existing session or create new one. Returns the session id."""
    if session_id is None:
        session_id = str(uuid.uuid4())

    if session_id not in sessions:
        sessions[session_id] = ImageAliasRepository()

    return session_id


def get_session(session_id: str) -> ImageAliasRepository:
    if not session_id or session_id not in sessions:
        raise ImageNotFoundError(f"Invalid session '{session_id}'")
    return sessions[session_id]


def image_to_png_bytes(image: PixelBuffer) -> BytesIO:
    buffer = BytesIO()
    PILImage.fromarray(np.array(image.pixels)).save(buffer, format='PNG')
    buffer.seek(0)
    return buffer


def image_to_base64(image: PixelBuffer) -> str:
    """Convert PixelBuffer to base64 PNG string for JSON response."""
    base64_string = base64.b64encode(image_to_png_bytes(image).getvalue()).decode('utf-8')
    return f"data:image/png;base64,{base64_string}"


# ─── Error mapping ────────────────────────────────────────────────
@app.errorhandler(ImageProcessingError)
def handle_processing_error(e):
    if isinstance(e, (ImageNotFoundError, UnknownOperationError)):
        status = 404
    else:
        status = 400
    logger.error(f"{type(e).__name__}: {e}")
    return jsonify({'success': False, 'error': type(e).__name__, 'message': str(e)}), status


@app.errorhandler(ValueError)
def handle_value_error(e):
    logger.error(f"Bad request: {e}")
    return jsonify({'success': False, 'error': 'ValueError', 'message': str(e)}), 400


# ─── Routes ───────────────────────────────────────────────────────
@app.route('/api/sessions', methods=['POST'])
def create_session():
    session_id = get_or_create_session()
    logger.info(f"Created session {session_id}")
    return jsonify({'success': True, 'session_id': session_id})


@app.route('/api/operations', methods=['GET'])
def list_operations():
    return jsonify({
        'operations': [
            {
                'name': name,
                'sources': operations.get(name).sources,
                'destinations': operations.get(name).destinations,
                'params': list(operations.get(name).params),
                'previewable': operations.get(name).previewable,
            }
            for name in operations.names
        ]
    })


@app.route('/api/images', methods=['POST'])
def upload_image():
    """Load an uploaded file into the session under the given alias."""
    session_id = get_or_create_session(request.form.get('session_id'))
    store = sessions[session_id]
    alias = request.form.get('alias', '')

    if 'image' not in request.files:
        return jsonify({'success': False, 'message': 'No image provided'}), 400
    file = request.files['image']
    if file.filename == '':
        return jsonify({'success': False, 'message': 'No file selected'}), 400
    if not store.is_valid_alias(alias):
        raise InvalidImageNameError(f"'{alias}': cannot be used as an alias for the image")

    Path(UPLOAD_FOLDER).mkdir(parents=True, exist_ok=True)
    filename = secure_filename(file.filename)
    temp_path = Path(UPLOAD_FOLDER) / f"upload_{uuid.uuid4().hex}_{filename}"
    file.save(str(temp_path))
    try:
        image = image_service.load(temp_path)
    finally:
        # Clean up temp file
        if temp_path.exists():
            temp_path.unlink()

    store.put(alias, image)
    logger.info(f"Session {session_id}: stored '{alias}' ({image.height}x{image.width})")
    return jsonify({
        'success': True,
        'session_id': session_id,
        'alias': alias,
        'height': image.height,
        'width': image.width,
    })


@app.route('/api/operations/<name>', methods=['POST'])
def run_operation(name):
    """
    Body: {"session_id", "sources": [...], "destinations": [...],
           "params": [...], "split": optional percentage}
    """
    payload = request.get_json(silent=True) or {}
    store = get_session(payload.get('session_id'))

    # JSON may carry numbers as strings; anything unconvertible is a bad request
    split = payload.get('split')
    try:
        params = [int(p) for p in payload.get('params', [])]
        split = float(split) if split is not None else None
    except (TypeError, ValueError) as e:
        raise ValueError(f"params must be integers and split a number: {e}") from e

    written = operations.run(
        store,
        name,
        sources=payload.get('sources', []),
        destinations=payload.get('destinations', []),
        params=params,
        split=split,
    )
    return jsonify({'success': True, 'operation': name, 'destinations': written})


@app.route('/api/images/<session_id>/<alias>', methods=['GET'])
def get_image(session_id, alias):
    image = get_session(session_id).get(alias)
    return send_file(image_to_png_bytes(image), mimetype='image/png',
                     download_name=f"{alias}.png")


@app.route('/api/images/<session_id>/<alias>/base64', methods=['GET'])
def get_image_base64(session_id, alias):
    image = get_session(session_id).get(alias)
    return jsonify({
        'success': True,
        'alias': alias,
        'height': image.height,
        'width': image.width,
        'image': image_to_base64(image),
    })


@app.route('/api/images/<session_id>/<alias>', methods=['DELETE'])
def delete_image(session_id, alias):
    get_session(session_id).remove(alias)
    return jsonify({'success': True, 'alias': alias})


@app.route('/api/sessions/<session_id>', methods=['GET'])
def describe_session(session_id):
    store = get_session(session_id)
    return jsonify({'success': True, 'session_id': session_id, 'aliases': list(store.names())})


def main():
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "5000"))
    logger.info(f"Starting image processing API on {host}:{port}")
    app.run(host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
