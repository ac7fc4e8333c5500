from dotenv import load_dotenv
import os

load_dotenv()


class Config:
    # A sentence counts as completed once its display score reaches this.
    PASSING_SCORE = float(os.getenv("PASSING_SCORE", "100"))

    # Entries kept by the (original, user_input) -> feedback LRU
    FEEDBACK_CACHE_SIZE = int(os.getenv("FEEDBACK_CACHE_SIZE", "512"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comma separated, "*" allows every origin
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    if not 0 <= PASSING_SCORE <= 100:
        raise ValueError("PASSING_SCORE must be between 0 and 100")
    if FEEDBACK_CACHE_SIZE < 1:
        raise ValueError("FEEDBACK_CACHE_SIZE must be at least 1")
