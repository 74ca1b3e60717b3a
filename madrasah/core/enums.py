"""
Enumerations shared by schemas, repositories and aggregation.

Values are the strings the database enums store; member names are English.
"""

from enum import Enum


class Department(str, Enum):
    MAKTAB = "মক্তব"
    HIFZ = "হিফজ"
    KITAB = "কিতাব"


class StudentStatus(str, Enum):
    ACTIVE = "সক্রিয়"
    INACTIVE = "নিষ্ক্রিয়"


class AttendanceStatus(str, Enum):
    PRESENT = "উপস্থিত"
    ABSENT = "অনুপস্থিত"
    LEAVE = "ছুটি"
    LATE = "বিলম্বে"


class SubjectType(str, Enum):
    STUDENT = "student"
    STAFF = "staff"


class ExpenseCategory(str, Enum):
    MARKET = "বাজার"
    SALARY = "বেতন"
    ELECTRICITY = "বিদ্যুৎ"
    WATER = "পানি"
    GAS = "গ্যাস"
    MAINTENANCE = "রক্ষণাবেক্ষণ"
    OTHER = "অন্যান্য"


class TransactionType(str, Enum):
    INCOME = "আয়"
    EXPENSE = "ব্যয়"


class SalaryStatus(str, Enum):
    PAID = "পরিশোধিত"
    UNPAID = "অপরিশোধিত"


class DocumentCategory(str, Enum):
    POLICY = "নীতিমালা"
    CERTIFICATE = "সার্টিফিকেট"
    REPORT = "রিপোর্ট"
    FORM = "ফর্ম"
    OTHER = "অন্যান্য"


class NoticePriority(str, Enum):
    NORMAL = "সাধারণ"
    IMPORTANT = "গুরুত্বপূর্ণ"
    URGENT = "জরুরী"


class EventType(str, Enum):
    GENERAL = "সাধারণ"
    EXAM = "পরীক্ষা"
    HOLIDAY = "ছুটি"
    CEREMONY = "অনুষ্ঠান"
    MEETING = "সভা"
    OTHER = "অন্যান্য"


class RoomType(str, Enum):
    GENERAL = "সাধারণ"
    AC = "এসি"
    SINGLE = "সিঙ্গেল"


class AllocationStatus(str, Enum):
    ACTIVE = "সক্রিয়"
    CANCELLED = "বাতিল"


class AppRole(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    ACCOUNTANT = "accountant"
    USER = "user"


class StaffRole(str, Enum):
    TEACHER = "teacher"
    NON_TEACHER = "non_teacher"


class WindowFilter(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Saturday first, as the madrasah week runs
DAYS_OF_WEEK = [
    "শনিবার",
    "রবিবার",
    "সোমবার",
    "মঙ্গলবার",
    "বুধবার",
    "বৃহস্পতিবার",
    "শুক্রবার",
]

MONTHS = [
    "জানুয়ারি", "ফেব্রুয়ারি", "মার্চ", "এপ্রিল", "মে", "জুন",
    "জুলাই", "আগস্ট", "সেপ্টেম্বর", "অক্টোবর", "নভেম্বর", "ডিসেম্বর",
]

DEFAULT_PAYMENT_METHOD = "নগদ"

# Designation fragments that suggest a teaching post. Only used to pre-fill
# StaffRole when the form leaves it blank and to read legacy rows without a role.
TEACHER_DESIGNATION_HINTS = ("শিক্ষক", "উস্তাদ", "মাওলানা")
