from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from src.extensions import db
from src.logger import get_logger
from tasks.task import Task, TaskCategory
from user.exceptions import ResourceNotFoundException, ValidationException
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("tasks", __name__)
logger = get_logger("StockDash.Tasks")


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to %s", action)
        raise


@bp.route("/", methods=["GET"])
@jwt_required
def list_tasks():
    """Categories in creation order, each with its tasks"""
    owner_id = get_current_owner_id()
    categories = TaskCategory.query.filter_by(owner_id=owner_id).order_by(TaskCategory.created_at).all()
    tasks = Task.query.filter_by(owner_id=owner_id).order_by(Task.created_at).all()
    grouped = {c.name: [] for c in categories}
    for t in tasks:
        if t.category in grouped:
            grouped[t.category].append({"id": t.id, "text": t.text})
    return jsonify([{"name": name, "tasks": items} for name, items in grouped.items()]), 200


@bp.route("/categories", methods=["POST"])
@jwt_required
def add_category():
    owner_id = get_current_owner_id()
    name = str((request.get_json(silent=True) or {}).get("name") or "").strip()
    if not name:
        raise ValidationException("name is required")
    if TaskCategory.query.filter_by(owner_id=owner_id, name=name).first():
        raise ValidationException(f"Category {name} already exists")
    db.session.add(TaskCategory(owner_id=owner_id, name=name))
    _commit("add task category")
    return jsonify({"name": name, "tasks": []}), 201


@bp.route("/categories/<name>", methods=["DELETE"])
@jwt_required
def delete_category(name):
    owner_id = get_current_owner_id()
    category = TaskCategory.query.filter_by(owner_id=owner_id, name=name).first()
    if not category:
        raise ResourceNotFoundException(f"Category {name} not found")
    # Tasks go with their category
    Task.query.filter_by(owner_id=owner_id, category=name).delete()
    db.session.delete(category)
    _commit("delete task category")
    return jsonify({"message": "Category deleted successfully"}), 200


@bp.route("/", methods=["POST"])
@jwt_required
def add_task():
    owner_id = get_current_owner_id()
    data = request.get_json(silent=True) or {}
    text = str(data.get("text") or "").strip()
    category = str(data.get("category") or "").strip()
    if not text or not category:
        raise ValidationException("text and category are required")
    if not TaskCategory.query.filter_by(owner_id=owner_id, name=category).first():
        raise ResourceNotFoundException(f"Category {category} not found")
    task = Task(owner_id=owner_id, text=text, category=category)
    db.session.add(task)
    _commit("add task")
    return jsonify({"id": task.id, "text": task.text, "category": task.category}), 201


@bp.route("/<task_id>", methods=["DELETE"])
@jwt_required
def delete_task(task_id):
    task = Task.query.filter_by(id=task_id, owner_id=get_current_owner_id()).first()
    if not task:
        raise ResourceNotFoundException(f"Task {task_id} not found")
    db.session.delete(task)
    _commit("delete task")
    return jsonify({"message": "Task deleted successfully"}), 200
