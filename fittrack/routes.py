from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from .errors import InternalError, NotFound, Unauthorized, ValidationError
from .utils.auth import current_identity, login_required
from .utils.validation import validate_new_workout, validate_workout_update

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
workouts_bp = Blueprint('workouts', __name__, url_prefix='/api/workouts')

logger = logging.getLogger(__name__)

# Query parameters accepted as exact-match filters on the workout list.
LIST_FILTERS = ('exercise', 'muscleGroup', 'intensity', 'date')


def _message(message: str, status: int = 200) -> Tuple[Response, int]:
    return jsonify({'message': message}), status


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def _owner_filter() -> str | None:
    """Owner restriction for update/delete, when ownership is enforced."""

    if current_app.config.get('ENFORCE_WORKOUT_OWNERSHIP'):
        return g.identity.user_id
    return None


# --- Auth -----------------------------------------------------------------


@auth_bp.route('/signup', methods=['POST'])
def signup() -> Tuple[Response, int]:
    payload = _json_body()
    email = payload.get('email')
    password = payload.get('password')

    if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
        return _message('Email and password required', 400)
    email = email.strip()

    users = current_app.user_store
    try:
        if users.find_by_email(email) is not None:
            logger.info('auth.signup.duplicate_email')
            return _message('Invalid credentials', 400)

        password_hash = current_app.password_service.hash(password)
        user = users.insert(email, password_hash)
    except SQLAlchemyError:
        logger.exception('auth.signup.error')
        raise InternalError()

    logger.info('auth.signup.success', extra={'user_id': user.id})
    return _message('User created successfully', 201)


@auth_bp.route('/login', methods=['POST'])
def login() -> Tuple[Response, int]:
    payload = _json_body()
    email = payload.get('email')
    password = payload.get('password')

    if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
        return _message('Invalid credentials', 401)

    passwords = current_app.password_service
    try:
        user = current_app.user_store.find_by_email(email.strip())
    except SQLAlchemyError:
        logger.exception('auth.login.error')
        raise InternalError()

    if user is None:
        passwords.verify_dummy(password)
        logger.info('auth.login.invalid_credentials')
        return _message('Invalid credentials', 401)

    if not passwords.verify(password, user.password_hash):
        logger.info('auth.login.invalid_credentials', extra={'user_id': user.id})
        return _message('Invalid credentials', 401)

    current_app.session_manager.create(user.id, user.email)
    logger.info('auth.login.success', extra={'user_id': user.id})
    return _message('Logged in successfully')


@auth_bp.route('/logout', methods=['POST'])
def logout() -> Tuple[Response, int]:
    current_app.session_manager.destroy()
    return _message('Logged out successfully')


@auth_bp.route('/status')
def status() -> Tuple[Response, int]:
    identity = current_identity()
    if identity is None:
        return jsonify({'authenticated': False}), 200
    return jsonify({'authenticated': True, 'email': identity.email}), 200


# --- Workouts -------------------------------------------------------------


@workouts_bp.route('', methods=['GET'])
@workouts_bp.route('/', methods=['GET'])
def list_workouts() -> Tuple[Response, int]:
    filters = {name: request.args[name] for name in LIST_FILTERS if request.args.get(name)}

    if request.args.get('mine', '').lower() in {'1', 'true', 'yes'}:
        identity = current_identity()
        if identity is None:
            raise Unauthorized()
        filters['userId'] = identity.user_id

    sort_by = request.args.get('sortBy') or None
    fields = request.args.get('fields', '')
    projection = [field.strip() for field in fields.split(',') if field.strip()]

    try:
        workouts = current_app.workout_store.find(filters, sort_by, projection)
    except SQLAlchemyError:
        logger.exception('workouts.list.error')
        raise InternalError()
    return jsonify(workouts), 200


@workouts_bp.route('/<workout_id>', methods=['GET'])
def get_workout(workout_id: str) -> Tuple[Response, int]:
    try:
        workout = current_app.workout_store.find_by_id(workout_id)
    except SQLAlchemyError:
        logger.exception('workouts.get.error', extra={'workout_id': workout_id})
        raise InternalError()

    if workout is None:
        raise NotFound('Workout not found')
    return jsonify(workout), 200


@workouts_bp.route('', methods=['POST'])
@workouts_bp.route('/', methods=['POST'])
@login_required
def create_workout() -> Tuple[Response, int]:
    fields = validate_new_workout(_json_body())
    user_id = g.identity.user_id

    try:
        workout_id = current_app.workout_store.insert(fields, user_id=user_id)
    except SQLAlchemyError:
        logger.exception('workouts.create.error', extra={'user_id': user_id})
        raise InternalError()

    logger.info('workouts.create.success', extra={'user_id': user_id, 'workout_id': workout_id})
    return _message('Workout created', 201)


@workouts_bp.route('/<workout_id>', methods=['PUT'])
@login_required
def update_workout(workout_id: str) -> Tuple[Response, int]:
    user_id = g.identity.user_id
    store = current_app.workout_store
    try:
        # Reject a malformed id before looking at the body.
        store.ensure_valid_id(workout_id)
        fields = validate_workout_update(_json_body())
        matched = store.update_by_id(workout_id, fields, owner_id=_owner_filter())
    except SQLAlchemyError:
        logger.exception('workouts.update.error', extra={'user_id': user_id, 'workout_id': workout_id})
        raise InternalError()

    if not matched:
        raise NotFound('Workout not found')
    logger.info('workouts.update.success', extra={'user_id': user_id, 'workout_id': workout_id})
    return _message('Workout updated')


@workouts_bp.route('/<workout_id>', methods=['DELETE'])
@login_required
def delete_workout(workout_id: str) -> Tuple[Response, int]:
    user_id = g.identity.user_id
    try:
        deleted = current_app.workout_store.delete_by_id(workout_id, owner_id=_owner_filter())
    except SQLAlchemyError:
        logger.exception('workouts.delete.error', extra={'user_id': user_id, 'workout_id': workout_id})
        raise InternalError()

    if not deleted:
        raise NotFound('Workout not found')
    logger.info('workouts.delete.success', extra={'user_id': user_id, 'workout_id': workout_id})
    return _message('Workout deleted')
