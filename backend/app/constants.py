# backend/app/constants.py
"""Closed vocabularies shared by models, schemas and services."""

# Mission visibility
VISIBILITY_PUBLIC = "public"
VISIBILITY_HOSPITAL = "hospital"
VISIBILITY_DEV = "dev"
VISIBILITY_TYPES = (VISIBILITY_PUBLIC, VISIBILITY_HOSPITAL, VISIBILITY_DEV)

# Sub-mission submission types
SUBMISSION_TYPES = (
    "file",
    "image",
    "link",
    "text",
    "review",
    "studio_submit",
    "attendance",
)

# Submission review states
STATUS_SUBMITTED = "submitted"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
SUBMISSION_STATUSES = (STATUS_SUBMITTED, STATUS_APPROVED, STATUS_REJECTED)

# Per-user mission progress
PROGRESS_IN_PROGRESS = "in_progress"
PROGRESS_COMPLETED = "completed"

# Period status of a date window
PERIOD_UPCOMING = "upcoming"
PERIOD_OPEN = "open"
PERIOD_CLOSED = "closed"

# Caller member types (forwarded by the session layer)
MEMBER_SUPERADMIN = "superadmin"
MEMBER_ADMIN = "admin"
MEMBER_HOSPITAL_ADMIN = "hospital_admin"
MEMBER_USER = "member"
CONTENT_ADMIN_TYPES = (MEMBER_SUPERADMIN, MEMBER_ADMIN)
REVIEW_ADMIN_TYPES = (MEMBER_SUPERADMIN, MEMBER_ADMIN, MEMBER_HOSPITAL_ADMIN)

# Sentinel used by drag-and-drop clients for "no folder"
UNCATEGORIZED_FOLDER = "0"

DEFAULT_FOLDER_COLOR = "#6366f1"
