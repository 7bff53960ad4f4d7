"""Application-wide constants and limits."""


class SecurityLimits:
    """Security-related constants and limits."""

    # Rate limiting
    MIN_RATE_LIMIT = 1  # Minimum requests per minute
    MAX_RATE_LIMIT = 10000  # Maximum requests per minute

    # Password requirements
    MIN_PASSWORD_LENGTH = 6
    MAX_PASSWORD_LENGTH = 100

    # bcrypt cost factor bounds
    MIN_BCRYPT_ROUNDS = 4
    MAX_BCRYPT_ROUNDS = 16


class UserLimits:
    """Field limits for user accounts."""

    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 50
    MAX_EMAIL_LENGTH = 255


class ProductLimits:
    """Field limits for product listings."""

    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 100
    MIN_DESCRIPTION_LENGTH = 10
    MAX_DESCRIPTION_LENGTH = 1000
    MIN_CATEGORY_LENGTH = 2
    MAX_CATEGORY_LENGTH = 50
    MAX_PRICE = 999999
    MIN_IMAGES = 1
    MAX_IMAGES = 10
    LOW_STOCK_THRESHOLD = 10  # stock strictly between 0 and this counts as low


class PaginationDefaults:
    """Default values for pagination."""

    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100
