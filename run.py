# run.py
# Main entry point to start the Flask development server.

import os
from dotenv import load_dotenv

# Load environment variables from .env file, if it exists
# Useful for storing sensitive info like SECRET_KEY or DATABASE_URL locally
dotenv_path = os.path.join(os.path.dirname(__file__), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)

from machinery_site import create_app # noqa: E402

flask_app = create_app()


if __name__ == '__main__':
    # debug=True enables auto-reloading and detailed error pages (DO NOT use in production)
    port = int(os.environ.get('PORT', 5000))
    flask_app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG') == '1')
