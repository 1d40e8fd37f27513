"""Configuration management for the Stripe onboarding assistant."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:5173,http://localhost:8000"
).split(",")

# Completion Configuration
COMPLETION_MODEL = os.getenv("COMPLETION_MODEL", "llama-3.3-70b-versatile")
COMPLETION_TIMEOUT = float(os.getenv("COMPLETION_TIMEOUT", "30"))  # seconds
COMPLETION_MAX_RETRIES = int(os.getenv("COMPLETION_MAX_RETRIES", "2"))
COMPLETION_RETRY_DELAY = float(os.getenv("COMPLETION_RETRY_DELAY", "1.0"))  # seconds

# Flow Configuration
# One of: strict_with_explanations, strict_simple, open_ended_advisor
FLOW_POLICY = os.getenv("FLOW_POLICY", "strict_with_explanations")

# Session Configuration
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "3600"))  # idle time before a session is dropped
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
