import os

from dotenv import load_dotenv
load_dotenv()


TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN") or os.getenv("BOT_TOKEN", "")
TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
PROXY_API_URL = os.getenv("PROXY_API_URL", "")

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "600"))
PRIMARY_TIMEOUT = float(os.getenv("PRIMARY_TIMEOUT", "5"))
FALLBACK_TIMEOUT = float(os.getenv("FALLBACK_TIMEOUT", "8"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

TMDB_BASE_URL = "https://api.themoviedb.org/3"
POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
WATCH_MIRRORS = (
    "https://cineflow1.vercel.app",
    "https://cineflow-rose.vercel.app",
)
DOWNLOAD_BASE_URL = "https://cineflow1.vercel.app/download"
GOOGLE_SEARCH_URL = "https://www.google.com/search?q="
