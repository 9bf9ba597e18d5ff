from src.school_admin.school_admin.main import create_app

app = create_app()

if __name__ == '__main__':
    try:
        app.run(debug=app.config.get("DEBUG", False))
    finally:
        app.extensions["school_admin"].shutdown()
