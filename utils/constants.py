"""
utils/constants.py

Purpose: Centralized static content

- All client-facing response messages
- Reusable constants

(Prevents hardcoding across the codebase)
"""

# ============================================================
# AUTHENTICATION
# ============================================================

MSG_REGISTER_SUCCESS = "Registration successful"
MSG_REGISTER_FAILED = "Failed to register user"
MSG_EMAIL_IN_USE = "Email already in use"
MSG_LOGIN_SUCCESS = "Login successful"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_LOGOUT_SUCCESS = "Logout successful"

# ============================================================
# USER CRUD
# ============================================================

MSG_USERS_RETRIEVED = "Users retrieved successfully"
MSG_USER_RETRIEVED = "User retrieved successfully"
MSG_USER_CREATED = "User created successfully"
MSG_USER_UPDATED = "User updated successfully"
MSG_USER_DELETED = "User deleted successfully"

MSG_NO_USERS = "No users found"
MSG_NO_USERS_FILTERED = "No users found with the given filters"
MSG_USER_NOT_FOUND = "User not found"

MSG_CREATE_FAILED = "Failed to create user"
MSG_UPDATE_FAILED = "Failed to update user"
MSG_DELETE_FAILED = "Failed to delete user"
MSG_DUPLICATE_ID = "User ID already allocated, please retry"

# ============================================================
# GENERIC
# ============================================================

MSG_SERVER_ERROR = "Server Error"

# Service result error codes
ERROR_STORE = "STORE_ERROR"
ERROR_DUPLICATE_KEY = "DUPLICATE_KEY"
ERROR_DUPLICATE_FIELD = "DUPLICATE_FIELD"
ERROR_ID_ALLOCATION = "ID_ALLOCATION_FAILED"
ERROR_INVALID_ARGUMENT = "INVALID_ARGUMENT"
