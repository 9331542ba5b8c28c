"""FastAPI main application for the Literature game backend"""

import logging

from .rules import rules_from_env
from .start import DEFAULT_PORT
from .ws import create_app

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = create_app(rules=rules_from_env())

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=DEFAULT_PORT)
