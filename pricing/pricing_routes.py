from flask import Blueprint, request, jsonify
from drafts.draft_service import DraftStore, SELECTED_MARKUPS_KEY
from pricing.pricing_service import (
    DEFAULT_MARKUPS,
    analyze_price,
    markup_table,
    normalize_markups,
    price_breakdown,
)
from products.product_service import ProductService, product_to_dict
from user.exceptions import ValidationException
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("pricing", __name__)


def _selected_markups(owner_id):
    return DraftStore(owner_id).load(SELECTED_MARKUPS_KEY, default=list(DEFAULT_MARKUPS))


@bp.route("/markups", methods=["GET"])
@jwt_required
def get_markups():
    return jsonify({"markups": _selected_markups(get_current_owner_id())}), 200


@bp.route("/markups", methods=["PUT"])
@jwt_required
def save_markups():
    payload = request.get_json(silent=True) or {}
    markups = normalize_markups(payload.get("markups"))
    DraftStore(get_current_owner_id()).save(SELECTED_MARKUPS_KEY, markups)
    return jsonify({"markups": markups}), 200


@bp.route("/recommendations", methods=["GET"])
@jwt_required
def get_recommendations():
    owner_id = get_current_owner_id()
    markups = _selected_markups(owner_id)
    products = ProductService.list_products(owner_id, search=request.args.get("search", "").strip())
    result = []
    for p in products:
        entry = product_to_dict(p)
        # No recommendation without a cost to mark up
        entry["recommendations"] = markup_table(p.buying_price, markups) if p.buying_price > 0 else []
        result.append(entry)
    return jsonify({"markups": markups, "products": result}), 200


@bp.route("/markup", methods=["POST"])
@jwt_required
def calculate_markup():
    payload = request.get_json(silent=True) or {}
    if payload.get("buying_price") is None or payload.get("markup_percent") is None:
        raise ValidationException("buying_price and markup_percent are required")
    return jsonify(price_breakdown(payload["buying_price"], payload["markup_percent"])), 200


@bp.route("/analyze", methods=["POST"])
@jwt_required
def analyze():
    payload = request.get_json(silent=True) or {}
    if payload.get("price") is None:
        raise ValidationException("price is required")
    return jsonify(analyze_price(payload["price"])), 200
