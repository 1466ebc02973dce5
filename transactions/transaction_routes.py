from flask import Blueprint, request, jsonify
from drafts.draft_service import PendingTransaction
from transactions.transaction_service import TransactionService
from user.exceptions import InsufficientStockException, ResourceNotFoundException, ValidationException
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("transactions", __name__)


@bp.route("/sales", methods=["POST"])
@jwt_required
def create_sale():
    payload = request.get_json(silent=True) or {}
    try:
        record = TransactionService.commit_sale(get_current_owner_id(), payload.get("items"))
    except InsufficientStockException as e:
        return jsonify({"error": "Failed to process sale", "reason": str(e)}), 409
    except ResourceNotFoundException as e:
        return jsonify({"error": "Failed to process sale", "reason": str(e)}), 404
    return jsonify(record.to_dict()), 201


def _commit_stock_in(kind):
    owner_id = get_current_owner_id()
    payload = request.get_json(silent=True) or {}
    items = payload.get("items")
    if items is None:
        # Commit whatever the owner has been assembling
        pending = PendingTransaction.load(owner_id, kind)
        if pending.draft.is_empty():
            raise ValidationException("Please select products")
        items = pending.items
    record = TransactionService.commit_stock_in(owner_id, kind, items)
    return jsonify(record.to_dict()), 201


@bp.route("/purchases", methods=["POST"])
@jwt_required
def create_purchase():
    return _commit_stock_in("purchase")


@bp.route("/restocks", methods=["POST"])
@jwt_required
def create_restock():
    return _commit_stock_in("restock")


@bp.route("/", methods=["GET"])
@jwt_required
def list_transactions():
    records = TransactionService.list_transactions(
        get_current_owner_id(),
        transaction_type=request.args.get("type") or None,
        range_key=request.args.get("range", "all"),
        start=request.args.get("start"),
        end=request.args.get("end"),
    )
    return jsonify([r.to_dict() for r in records]), 200


@bp.route("/<transaction_id>", methods=["GET"])
@jwt_required
def get_transaction(transaction_id):
    record = TransactionService.get_transaction(get_current_owner_id(), transaction_id)
    return jsonify(record.to_dict()), 200
