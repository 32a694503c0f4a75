from enum import Enum


class UserRole(str, Enum):
    """Role tag stored on every user."""
    USER = "USER"              # student
    PARENT = "PARENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"


STAFF_ROLES = [UserRole.ADMIN.value, UserRole.SUPERVISOR.value]


class PurchaseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SubscriptionStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    DENIED = "DENIED"
    EXPIRED = "EXPIRED"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


class ContentType(str, Enum):
    """Kinds of items in a course's content sequence."""
    CHAPTER = "chapter"
    QUIZ = "quiz"
    LIVESTREAM = "livestream"


class BalanceTransactionType(str, Enum):
    ADJUSTMENT = "ADJUSTMENT"  # set by admin / supervisor
    PURCHASE = "PURCHASE"      # course bought from balance


class PromoCodeStatus(str, Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
