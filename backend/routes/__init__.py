# routes/__init__.py
"""
Blueprint registration helper
"""

def register_blueprints(app):
    """Register all application blueprints"""
    from routes.lookup import lookup_bp

    app.register_blueprint(lookup_bp)
