"""Central Configuration for the NeuraLink AI core."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Base Directory (Root of the project)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load Environment Variables
load_dotenv(BASE_DIR / ".env")

# LLM Settings
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
HEALTH_MODEL_NAME = os.getenv("HEALTH_MODEL_NAME", "gemini-2.5-pro")
IMAGE_MODEL_NAME = os.getenv("IMAGE_MODEL_NAME", "imagen-3.0-generate-001")
REQUEST_TIMEOUT_SECONDS = 30

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Local Engine Settings
MAX_HISTORY_ENTRIES = 50
TRIMMED_HISTORY_ENTRIES = 30
RECENT_CONTEXT_MESSAGES = 5

# Simulated warm-up (seconds): model load, emotion recognition, educational content
DEFAULT_STARTUP_DELAYS = (2.0, 1.0, 0.5)
