"""
Structured error codes.
Gives every failure a stable code with an admin-facing and a user-facing message.
"""

class ErrorCode:
    """Catalog of error codes with messages for end users and administrators"""

    # Request validation (1xxx)
    ERR_1001 = {
        "code": "ERR_1001",
        "admin_msg": "Required field missing from request body",
        "user_msg": "Some required information is missing. Please complete the form and try again."
    }

    ERR_1002 = {
        "code": "ERR_1002",
        "admin_msg": "Field value failed a validation rule",
        "user_msg": "One of the values you entered is not valid. Please review the form."
    }

    ERR_1003 = {
        "code": "ERR_1003",
        "admin_msg": "Unknown status or enum value",
        "user_msg": "The selected status is not available."
    }

    ERR_1004 = {
        "code": "ERR_1004",
        "admin_msg": "Malformed date or number in request",
        "user_msg": "A date or amount is in the wrong format."
    }

    # AI / state-data verification (2xxx)
    ERR_2001 = {
        "code": "ERR_2001",
        "admin_msg": "LLM API timeout",
        "user_msg": "The verification service timed out. Try again in a few minutes."
    }

    ERR_2002 = {
        "code": "ERR_2002",
        "admin_msg": "LLM quota exceeded or rate limited",
        "user_msg": "The verification service is at capacity. Contact support."
    }

    ERR_2003 = {
        "code": "ERR_2003",
        "admin_msg": "LLM answer did not match the expected JSON shape",
        "user_msg": "The verification service returned an unexpected answer."
    }

    ERR_2004 = {
        "code": "ERR_2004",
        "admin_msg": "LLM API key missing, invalid or expired",
        "user_msg": "The verification service is not configured. Contact an administrator."
    }

    # Database (3xxx)
    ERR_3001 = {
        "code": "ERR_3001",
        "admin_msg": "Commit failed",
        "user_msg": "We could not save your changes. Try again and contact support if it persists."
    }

    ERR_3003 = {
        "code": "ERR_3003",
        "admin_msg": "Database connection lost",
        "user_msg": "We are having trouble reaching our servers. Try again shortly."
    }

    ERR_3004 = {
        "code": "ERR_3004",
        "admin_msg": "Integrity violation (duplicate key or constraint)",
        "user_msg": "This record already exists."
    }

    # System / generic (9xxx)
    ERR_9001 = {
        "code": "ERR_9001",
        "admin_msg": "Uncategorized error (generic exception)",
        "user_msg": "An unexpected error occurred. Note this error code and contact support."
    }

    ERR_9002 = {
        "code": "ERR_9002",
        "admin_msg": "General timeout",
        "user_msg": "The operation took too long. Try again or contact support."
    }

    @staticmethod
    def get_error(exception_or_code):
        """
        Returns the error entry for an exception or a code.

        Args:
            exception_or_code: Exception object or code string (e.g. "ERR_1001")

        Returns:
            dict with code, admin_msg, user_msg
        """
        if isinstance(exception_or_code, str):
            return getattr(ErrorCode, exception_or_code, ErrorCode.ERR_9001)

        error_str = str(exception_or_code).lower()

        # Validation
        if "required" in error_str or "missing" in error_str:
            return ErrorCode.ERR_1001
        if "invalid status" in error_str:
            return ErrorCode.ERR_1003
        if "isoformat" in error_str or "invalid literal" in error_str:
            return ErrorCode.ERR_1004

        # LLM providers
        if "timeout" in error_str and ("openai" in error_str or "gemini" in error_str):
            return ErrorCode.ERR_2001
        if "quota" in error_str or "rate limit" in error_str:
            return ErrorCode.ERR_2002
        if "api key" in error_str or "authentication" in error_str:
            return ErrorCode.ERR_2004
        if "json" in error_str or "parsing" in error_str:
            return ErrorCode.ERR_2003

        # Database
        if "duplicate" in error_str or "unique constraint" in error_str:
            return ErrorCode.ERR_3004
        if "database" in error_str or "connection" in error_str:
            return ErrorCode.ERR_3003
        if "commit" in error_str:
            return ErrorCode.ERR_3001

        if "timeout" in error_str or "timed out" in error_str:
            return ErrorCode.ERR_9002

        return ErrorCode.ERR_9001
