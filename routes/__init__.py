def register_routes(app):
    from products.product_routes import bp as product_bp
    app.register_blueprint(product_bp, url_prefix="/products")

    from suppliers.supplier_routes import bp as supplier_bp
    app.register_blueprint(supplier_bp, url_prefix="/suppliers")

    from pricing.pricing_routes import bp as pricing_bp
    app.register_blueprint(pricing_bp, url_prefix="/pricing")

    from transactions.transaction_routes import bp as transaction_bp
    app.register_blueprint(transaction_bp, url_prefix="/transactions")

    from drafts.draft_routes import bp as draft_bp
    app.register_blueprint(draft_bp, url_prefix="/drafts")

    from reports.report_routes import bp as report_bp
    app.register_blueprint(report_bp, url_prefix="/reports")

    from tasks.task_routes import bp as task_bp
    app.register_blueprint(task_bp, url_prefix="/tasks")
