def register_blueprints(app):
    from app.api.auth import bp as auth_bp
    from app.api.search import bp as search_bp
    from app.api.resources import bp as resources_bp
    from app.api.subjects import bp as subjects_bp
    from app.api.progress import bp as progress_bp
    from app.api.bookmarks import bp as bookmarks_bp
    from app.api.reviews import bp as reviews_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(resources_bp)
    app.register_blueprint(subjects_bp)
    app.register_blueprint(progress_bp)
    app.register_blueprint(bookmarks_bp)
    app.register_blueprint(reviews_bp)
