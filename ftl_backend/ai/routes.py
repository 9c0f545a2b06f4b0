# ftl_backend/ai/routes.py
# Website chat widget
from flask import request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from . import ai_bp
from .. import limiter
from ..models.base import db
from ..services.chat_service import handle_message, get_history
from ..utils import get_request_data, sanitize_input


@ai_bp.route('/chat', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('CHAT_RATELIMITS', "30 per minute"))
def chat():
    data = get_request_data()
    raw_message = data.get('message')
    message = sanitize_input(raw_message) if isinstance(raw_message, str) else None
    if not message:
        return jsonify(message="Message is required", success=False), 400
    max_length = current_app.config.get('CHAT_MAX_MESSAGE_LENGTH', 1000)
    if len(message) > max_length:
        return jsonify(message=f"Message must be at most {max_length} characters", success=False), 400
    session_id = sanitize_input(data.get('session_id'), max_length=64) or None

    try:
        result = handle_message(message, session_id=session_id)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to store chat exchange from {request.remote_addr}: {e}", exc_info=True)
        return jsonify(message="The assistant is unavailable right now. Please try again later.", success=False), 500
    return jsonify(success=True, data=result), 200


@ai_bp.route('/chat/<string:session_id>', methods=['GET'])
def chat_history(session_id):
    return jsonify(success=True, data=get_history(session_id)), 200
