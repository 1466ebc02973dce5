from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from src.extensions import db
from src.logger import get_logger
from suppliers.supplier import Supplier
from user.exceptions import ResourceNotFoundException, ValidationException
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("suppliers", __name__)
logger = get_logger("StockDash.Suppliers")


def supplier_to_dict(s):
    return {
        "id": s.id,
        "supplier_code": s.supplier_code,
        "name": s.name,
        "contact": s.contact,
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "updated_at": s.updated_at.isoformat() if s.updated_at else None,
    }


def _owned_supplier(supplier_id):
    s = Supplier.query.filter_by(id=supplier_id, owner_id=get_current_owner_id()).first()
    if not s:
        raise ResourceNotFoundException(f"Supplier {supplier_id} not found")
    return s


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to %s supplier", action)
        raise


@bp.route("/", methods=["POST"])
@jwt_required
def create_supplier():
    data = request.get_json(silent=True) or {}
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValidationException("name is required")

    s = Supplier(
        owner_id=get_current_owner_id(),
        supplier_code=str(data.get("supplier_code") or "").strip() or None,
        name=name,
        contact=str(data.get("contact") or "").strip() or None,
    )
    db.session.add(s)
    _commit("create")
    return jsonify(supplier_to_dict(s)), 201


@bp.route("/", methods=["GET"])
@jwt_required
def list_suppliers():
    search = request.args.get('search', '').strip().lower()
    suppliers = Supplier.query.filter_by(owner_id=get_current_owner_id()).all()
    if search:
        suppliers = [
            s for s in suppliers
            if search in s.name.lower()
            or search in (s.supplier_code or "").lower()
            or search in (s.contact or "").lower()
        ]
    suppliers.sort(key=lambda s: s.name.lower())
    return jsonify([supplier_to_dict(s) for s in suppliers]), 200


@bp.route("/<supplier_id>", methods=["GET"])
@jwt_required
def get_supplier(supplier_id):
    return jsonify(supplier_to_dict(_owned_supplier(supplier_id))), 200


@bp.route("/<supplier_id>", methods=["PUT"])
@jwt_required
def update_supplier(supplier_id):
    s = _owned_supplier(supplier_id)
    data = request.get_json(silent=True) or {}
    if "name" in data:
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationException("name cannot be empty")
        s.name = name
    if "supplier_code" in data:
        s.supplier_code = str(data.get("supplier_code") or "").strip() or None
    if "contact" in data:
        s.contact = str(data.get("contact") or "").strip() or None
    _commit("update")
    return jsonify(supplier_to_dict(s)), 200


@bp.route("/<supplier_id>", methods=["DELETE"])
@jwt_required
def delete_supplier(supplier_id):
    s = _owned_supplier(supplier_id)
    db.session.delete(s)
    _commit("delete")
    return jsonify({"message": "Supplier deleted successfully"}), 200
