"""Entry point for running the bracket API."""

import os

from flask import jsonify

from leaguebracket import create_app

app = create_app()


@app.route("/health")
def health_check():
    """Report that the API is up."""
    return jsonify({"status": "ok"}), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "27272"))
    app.run(debug=True, host="0.0.0.0", port=port)  # nosec
