from flask import Blueprint, request, jsonify
from drafts.draft_service import DraftStore, PendingTransaction, SELECTED_MARKUPS_KEY, DRAFT_KEYS
from pricing.pricing_service import normalize_markups
from products.product_service import ProductService
from src.numeric import money
from transactions.schemas import LineItem, TransactionDraft
from user.exceptions import ValidationException
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("drafts", __name__)

KIND_BY_KEY = {key: kind for kind, key in DRAFT_KEYS.items()}


def _draft_to_dict(pending):
    return {
        "kind": pending.kind,
        "key": pending.key,
        "items": pending.draft.to_snapshot(),
        "total": str(money(pending.total)),
    }


def _quantity(payload, default=None):
    value = payload.get("quantity", default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException("quantity must be an integer")


# -------------------------
# Raw snapshots
# -------------------------
@bp.route("/<key>", methods=["GET"])
@jwt_required
def get_snapshot(key):
    value = DraftStore(get_current_owner_id()).load(key, default=[])
    return jsonify({"key": key, "value": value}), 200


@bp.route("/<key>", methods=["PUT"])
@jwt_required
def save_snapshot(key):
    owner_id = get_current_owner_id()
    payload = request.get_json(silent=True) or {}
    value = payload.get("value")
    if key == SELECTED_MARKUPS_KEY:
        value = normalize_markups(value)
    elif key in KIND_BY_KEY:
        if not isinstance(value, list):
            raise ValidationException(f"{key} must be a list")
        kind = KIND_BY_KEY[key]
        pending = PendingTransaction(owner_id, kind, TransactionDraft(kind, value))
        pending.save()
        return jsonify({"key": key, "value": pending.draft.to_snapshot()}), 200
    DraftStore(owner_id).save(key, value)
    return jsonify({"key": key, "value": value}), 200


@bp.route("/<key>", methods=["DELETE"])
@jwt_required
def clear_snapshot(key):
    DraftStore(get_current_owner_id()).clear(key)
    return jsonify({"message": f"{key} cleared"}), 200


# -------------------------
# Incremental purchase/restock drafts
# -------------------------
@bp.route("/<kind>/items", methods=["POST"])
@jwt_required
def add_draft_item(kind):
    owner_id = get_current_owner_id()
    payload = request.get_json(silent=True) or {}
    if not payload.get("product_id"):
        raise ValidationException("product_id is required")
    quantity = _quantity(payload, default=1)
    if quantity < 1:
        raise ValidationException("quantity must be at least 1")

    pending = PendingTransaction.load(owner_id, kind)
    product = ProductService.get_product(owner_id, payload["product_id"])
    pending.draft.add_item(LineItem(
        product_id=product.id,
        product_name=product.product_name,
        quantity=quantity,
        unit_price=product.buying_price,
        supplier_name=product.supplier or None,
    ))
    pending.save()
    return jsonify(_draft_to_dict(pending)), 200


@bp.route("/<kind>/items/<product_id>", methods=["PATCH"])
@jwt_required
def update_draft_item(kind, product_id):
    payload = request.get_json(silent=True) or {}
    pending = PendingTransaction.load(get_current_owner_id(), kind)
    pending.draft.update_quantity(product_id, _quantity(payload))
    pending.save()
    return jsonify(_draft_to_dict(pending)), 200


@bp.route("/<kind>/items/<product_id>", methods=["DELETE"])
@jwt_required
def remove_draft_item(kind, product_id):
    pending = PendingTransaction.load(get_current_owner_id(), kind)
    pending.draft.remove_item(product_id)
    pending.save()
    return jsonify(_draft_to_dict(pending)), 200


@bp.route("/<kind>/items", methods=["GET"])
@jwt_required
def get_draft(kind):
    pending = PendingTransaction.load(get_current_owner_id(), kind)
    return jsonify(_draft_to_dict(pending)), 200
