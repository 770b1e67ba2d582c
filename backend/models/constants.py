"""Validation limits, patterns and user-facing messages shared across layers."""

# Field limits
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100
BIO_MAX_LENGTH = 500
INTERESTS_MAX_LENGTH = 500
BANNED_WORD_MAX_LENGTH = 100
FLAGGED_CONTENT_MAX_LENGTH = 500

# Patterns
NATIONAL_ID_PATTERN = r"^[0-9]{14}$"
EMAIL_IDENTIFIER_PATTERN = r"^[A-Za-z0-9+_.-]+@(.+)$"
PHONE_PATTERN = r"^[+]?[0-9]{10,20}$"
LINKEDIN_PATTERN = r"^https?://(www\.)?linkedin\.com/.*$"
GITHUB_PATTERN = r"^https?://(www\.)?github\.com/.*$"

# Uploads
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
DEFAULT_FILE_EXTENSION = "jpg"
PROFILE_PHOTO_NAME = "profile_photo"
NATIONAL_ID_SCAN_NAME = "national_id_scan"

# Fields checked against the banned-word dictionary on profile update
MODERATED_PROFILE_FIELDS = ("bio", "interests", "linkedin", "github")

# Messages
MSG_SIGNUP_SUCCESS = "User registered successfully. Awaiting admin approval."
MSG_LOGIN_SUCCESS = "Login successful"
MSG_NOT_PENDING = "User is not in pending status"
MSG_UNVERIFIED_APPROVAL = (
    "Cannot approve user with unverified email. Please verify email first."
)
MSG_EMAIL_ALREADY_VERIFIED = "Email is already verified"
MSG_SELF_ROLE_CHANGE = "Cannot change your own role"
MSG_INVALID_ROLE = "Invalid role. Must be STUDENT or ADMIN"
MSG_DEPARTMENT_FACULTY_MISMATCH = "Department does not belong to the selected faculty"
MSG_INVALID_YEAR = "Invalid year for the selected faculty"
MSG_PROFILE_ACCESS_DENIED = (
    "Access denied: You don't have permission to view this profile"
)
MSG_BANNED_WORD_EMPTY = "Banned word cannot be empty"
MSG_ADMIN_REQUIRED = "Admin privileges required"
