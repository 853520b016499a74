"""Global constants for the apkgate application."""

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
INVITATIONS_COLLECTION = "invitations"
INSTALL_REQUESTS_COLLECTION = "installRequests"

# Firestore rejects write batches above this size
FIRESTORE_BATCH_LIMIT = 500

# Roles
ROLE_LEADER = "leader"
ROLE_MEMBER = "member"
ROLES = (ROLE_LEADER, ROLE_MEMBER)

# Status of new invitations and install requests
STATUS_PENDING = "pending"

# Credential / validation policy
EMAIL_PATTERN = r"^[A-Za-z0-9_.%+-]+@gmail\.com\Z"
PASSWORD_MIN_LENGTH = 8
PASSWORD_PATTERN = r"^(?=.*[a-zA-Z])(?=.*\d)"

# User document fields that never leave the service
PRIVATE_USER_FIELDS = ("passwordHash", "fcmToken")

# Push notification
NOTIFICATION_TARGET_SCREEN = "AdminApprovalScreen"
