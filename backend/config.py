"""Configuration management for Content Analyzer."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Corpus Backend
CORPUS_BACKEND = os.getenv("CORPUS_BACKEND", "supabase")  # "supabase" or "memory"
CORPUS_FILE = os.getenv("CORPUS_FILE", "corpus.json")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
POSTS_TABLE = os.getenv("POSTS_TABLE", "posts")
SITE_URL = os.getenv("SITE_URL", "http://localhost")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Analysis Configuration
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
MATCH_MODE = os.getenv("MATCH_MODE", "substring")  # "substring" or "word"

# Client Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15.0"))  # seconds
DEBOUNCE_SECONDS = float(os.getenv("DEBOUNCE_SECONDS", "0.5"))  # seconds
RESET_PAGE_ON_KEYWORD_CHANGE = os.getenv("RESET_PAGE_ON_KEYWORD_CHANGE", "true").lower() == "true"
NONCE_HEADER = "X-Analyzer-Nonce"
