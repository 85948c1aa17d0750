import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to python path for tests
ROOT_DIR = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT_DIR))

# Load .env so CERTPORTAL_* settings match the running API
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")
