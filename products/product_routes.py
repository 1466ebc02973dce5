from flask import Blueprint, request, jsonify
from products.product_service import ProductService, product_to_dict
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("products", __name__)


# -------------------------
# Create product
# -------------------------
@bp.route("/", methods=["POST"])
@jwt_required
def create_product():
    data = request.get_json(silent=True) or {}
    product = ProductService.create_product(get_current_owner_id(), data)
    return jsonify(product_to_dict(product)), 201


# -------------------------
# List products with search and sorting
# -------------------------
@bp.route("/", methods=["GET"])
@jwt_required
def list_products():
    products = ProductService.list_products(
        get_current_owner_id(),
        search=request.args.get("search", "").strip(),
        sort_by=request.args.get("sort", "name"),
        order=request.args.get("order", "asc"),
        in_stock_only=request.args.get("in_stock") in ("1", "true"),
    )
    return jsonify([product_to_dict(p) for p in products]), 200


@bp.route("/<product_id>", methods=["GET"])
@jwt_required
def get_product(product_id):
    product = ProductService.get_product(get_current_owner_id(), product_id)
    return jsonify(product_to_dict(product)), 200


@bp.route("/<product_id>", methods=["PUT"])
@jwt_required
def update_product(product_id):
    data = request.get_json(silent=True) or {}
    product = ProductService.update_product(get_current_owner_id(), product_id, data)
    return jsonify(product_to_dict(product)), 200


@bp.route("/<product_id>", methods=["DELETE"])
@jwt_required
def delete_product(product_id):
    ProductService.delete_product(get_current_owner_id(), product_id)
    return jsonify({"message": "Product deleted successfully"}), 200
