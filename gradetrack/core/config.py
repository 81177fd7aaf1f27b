import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Durability
DATABASE_URL = os.getenv("GRADETRACK_DATABASE_URL", f"sqlite:///{BASE_DIR}/gradetrack.db")
ASSIGNMENTS_KEY = "assignments"
SUBMISSIONS_KEY = "submissions"

# Uploads
UPLOAD_DIR = Path(os.getenv("GRADETRACK_UPLOAD_DIR", BASE_DIR / "uploads"))
ALLOWED_CONTENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB

# Late policy
ALLOW_LATE_SUBMISSIONS = os.getenv("GRADETRACK_ALLOW_LATE", "0") == "1"

# Grading scale
MIN_GRADE = 0
MAX_GRADE = 100
