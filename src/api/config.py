"""
Environment configuration for the Studio Estimator API.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Supabase configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")

# Pending estimate drafts (file-based persistence)
DRAFT_DATA_FILE = os.getenv("DRAFT_DATA_FILE", "/tmp/studio_estimator_drafts.json")
DRAFT_TTL_MINUTES = int(os.getenv("DRAFT_TTL_MINUTES", "60"))

# Quote display
TAX_DISPLAY_RATE = float(os.getenv("TAX_DISPLAY_RATE", "0.18"))  # GST, display only
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
