"""Main entry point for the application."""

from flask import current_app

from apkgate import create_app

app = create_app()


@app.route("/health")
def health_check():
    """Perform a simple health check."""
    return {"status": "OK", "version": current_app.config.get("APP_VERSION")}, 200


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=7071)  # nosec
