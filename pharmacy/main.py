# pharmacy/main.py
import uvicorn

from pharmacy.api import create_app
from pharmacy.data.database import init_db
from pharmacy.utils.settings import PORT
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

# tabele musza istniec zanim przyjdzie pierwsze zadanie
try:
    init_db()
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
