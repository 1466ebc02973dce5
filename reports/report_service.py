import io
from datetime import datetime
from decimal import Decimal

import pandas as pd

from src.numeric import money
from pricing.pricing_service import ADMIN_FEE_RATE, PACKAGING_FEE_RATE, TOTAL_FEE_RATE
from products.product import Product
from transactions.transaction_service import TransactionService
from user.exceptions import ValidationException

LOW_STOCK_THRESHOLD = 5

INVENTORY_SORTS = ("name", "stock", "value")
STOCK_FILTERS = ("all", "low", "out")

ZERO = Decimal('0')


def _cost(item):
    return item.buying_price if item.buying_price is not None else ZERO


# -------------------------
# Pure reducers
# -------------------------
def sales_summary(records):
    total_sales = ZERO
    total_items = 0
    total_profit = ZERO
    for record in records:
        total_sales += record.total
        for item in record.items:
            total_items += item.quantity
            total_profit += (item.unit_price - _cost(item) - item.unit_price * TOTAL_FEE_RATE) * item.quantity
    return {
        "total_transactions": len(records),
        "total_sales": money(total_sales),
        "total_items": total_items,
        "total_profit": money(total_profit),
    }


def profit_summary(records):
    revenue = cost = admin_fees = packaging_fees = ZERO
    for record in records:
        for item in record.items:
            item_revenue = item.unit_price * item.quantity
            revenue += item_revenue
            cost += _cost(item) * item.quantity
            admin_fees += item_revenue * ADMIN_FEE_RATE
            packaging_fees += item_revenue * PACKAGING_FEE_RATE
    profit = revenue - cost - admin_fees - packaging_fees
    margin = (profit / revenue * 100) if revenue > 0 else ZERO
    return {
        "revenue": money(revenue),
        "cost": money(cost),
        "admin_fees": money(admin_fees),
        "packaging_fees": money(packaging_fees),
        "profit": money(profit),
        "profit_margin": money(margin),
    }


def restock_summary(records):
    total_items = 0
    total_cost = ZERO
    unique_products = 0
    for record in records:
        # Distinct per restock, summed over restocks
        unique_products += len({item.product_id for item in record.items})
        for item in record.items:
            total_items += item.quantity
            total_cost += item.line_total
    return {
        "total_transactions": len(records),
        "total_items": total_items,
        "total_cost": money(total_cost),
        "unique_products": unique_products,
    }


def inventory_report(products, sort_by="name", stock_filter="all", low_stock_threshold=LOW_STOCK_THRESHOLD):
    """Sorted, filtered product list plus stock value and low/out counts."""
    if sort_by not in INVENTORY_SORTS:
        raise ValidationException(f"sort_by must be one of {', '.join(INVENTORY_SORTS)}")
    if stock_filter not in STOCK_FILTERS:
        raise ValidationException(f"filter must be one of {', '.join(STOCK_FILTERS)}")

    products = list(products)
    if stock_filter == "low":
        selected = [p for p in products if p.stock_quantity <= low_stock_threshold]
    elif stock_filter == "out":
        selected = [p for p in products if p.stock_quantity == 0]
    else:
        selected = products

    if sort_by == "name":
        selected = sorted(selected, key=lambda p: (p.product_name or "").lower())
    elif sort_by == "stock":
        selected = sorted(selected, key=lambda p: p.stock_quantity, reverse=True)
    else:
        selected = sorted(selected, key=lambda p: p.stock_quantity * p.buying_price, reverse=True)

    return {
        "products": selected,
        "total_value": money(sum((p.stock_quantity * p.buying_price for p in selected), ZERO)),
        "low_stock_count": len([p for p in products if p.stock_quantity <= low_stock_threshold]),
        "out_of_stock_count": len([p for p in products if p.stock_quantity == 0]),
    }


def inventory_row(product):
    return {
        "id": product.id,
        "product_code": product.product_code,
        "product_name": product.product_name,
        "stock_quantity": product.stock_quantity,
        "buying_price": str(product.buying_price),
        "selling_price": str(product.selling_price),
        "stock_value": str(money(product.stock_quantity * product.buying_price)),
        "last_restock_date": product.last_restock_date.isoformat() if product.last_restock_date else None,
        "last_sale_date": product.last_sale_date.isoformat() if product.last_sale_date else None,
    }


class ReportService:
    @staticmethod
    def _report_header(name, range_key, start, end):
        return {
            "report_id": f"RPT-{datetime.now().strftime('%Y-%m-%d-%H%M')}",
            "report_name": name,
            "generated_date": datetime.now().isoformat(),
            "date_range": {"range": range_key, "start_date": start, "end_date": end},
        }

    @staticmethod
    def generate_sales_report(owner_id, range_key="all", start=None, end=None):
        records = TransactionService.list_transactions(owner_id, "sale", range_key, start, end)
        report = ReportService._report_header("Sales Report", range_key, start, end)
        report["summary"] = sales_summary(records)
        report["transactions"] = [r.to_dict() for r in records]
        return report

    @staticmethod
    def generate_profit_report(owner_id, range_key="all", start=None, end=None):
        records = TransactionService.list_transactions(owner_id, "sale", range_key, start, end)
        report = ReportService._report_header("Profit Report", range_key, start, end)
        report["summary"] = profit_summary(records)
        report["transactions"] = [
            {**r.to_dict(), "profit": profit_summary([r])["profit"]} for r in records
        ]
        return report

    @staticmethod
    def generate_restock_report(owner_id, range_key="all", start=None, end=None):
        records = TransactionService.list_transactions(owner_id, "restock", range_key, start, end)
        report = ReportService._report_header("Restock Report", range_key, start, end)
        report["summary"] = restock_summary(records)
        report["transactions"] = [r.to_dict() for r in records]
        return report

    @staticmethod
    def generate_inventory_report(owner_id, sort_by="name", stock_filter="all", low_stock_threshold=LOW_STOCK_THRESHOLD):
        products = Product.query.filter_by(owner_id=owner_id).all()
        result = inventory_report(products, sort_by, stock_filter, low_stock_threshold)
        return {
            "report_id": f"RPT-{datetime.now().strftime('%Y-%m-%d-%H%M')}",
            "report_name": "Inventory Report",
            "generated_date": datetime.now().isoformat(),
            "summary": {
                "total_products": len(products),
                "total_value": result["total_value"],
                "low_stock_items": result["low_stock_count"],
                "out_of_stock_items": result["out_of_stock_count"],
            },
            "products": [inventory_row(p) for p in result["products"]],
        }

    @staticmethod
    def export_inventory_excel(owner_id, sort_by="name", stock_filter="all", low_stock_threshold=LOW_STOCK_THRESHOLD):
        """Inventory report as an in-memory xlsx workbook."""
        products = Product.query.filter_by(owner_id=owner_id).all()
        result = inventory_report(products, sort_by, stock_filter, low_stock_threshold)
        data = []
        for p in result["products"]:
            data.append({
                "Product ID": p.product_code,
                "Product Name": p.product_name,
                "Supplier": p.supplier,
                "Stock": p.stock_quantity,
                "Buying Price": float(p.buying_price),
                "Selling Price": float(p.selling_price),
                "Stock Value": float(p.stock_quantity * p.buying_price),
                "Last Restock": p.last_restock_date.strftime('%Y-%m-%d %H:%M:%S') if p.last_restock_date else '',
                "Last Sale": p.last_sale_date.strftime('%Y-%m-%d %H:%M:%S') if p.last_sale_date else '',
            })

        df = pd.DataFrame(data, columns=[
            "Product ID", "Product Name", "Supplier", "Stock", "Buying Price",
            "Selling Price", "Stock Value", "Last Restock", "Last Sale",
        ])
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Inventory')
        output.seek(0)
        return output
