import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

# Structured axes below this confidence never become required/none
CONFIDENCE_FLOOR = float(os.getenv("ARCH_CONFIDENCE_FLOOR", "0.6"))
# Confidence needed before the performance composite rule fires
COMPOSITE_CONFIDENCE = float(os.getenv("ARCH_COMPOSITE_CONFIDENCE", "0.85"))

# Advisory scoring router
SCORE_THRESHOLD = float(os.getenv("ARCH_SCORE_THRESHOLD", "0.3"))
FALLBACK_PATTERN = os.getenv("ARCH_FALLBACK_PATTERN", "SERVERLESS_WEB_APP")

# Tokens inspected before a keyword when looking for "no", "without", ...
NEGATION_WINDOW = int(os.getenv("ARCH_NEGATION_WINDOW", "3"))

DOMAINS_PATH = os.getenv(
    "ARCH_DOMAINS_PATH",
    os.path.join(os.path.dirname(__file__), "domain", "domains"),
)

LOG_LEVEL = os.getenv("ARCH_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("ARCH_LOG_FORMAT", "console")  # console | json
