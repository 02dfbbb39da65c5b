from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# Local storage directory (cart + contact records)
STORAGE_DIR = BASE_DIR / 'local_storage'
