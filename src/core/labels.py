"""
Display labels and identity constants for the pastoral care tracker.
"""

# Application Identity
APP_NAME = "Pastoral Care Tracker"
APP_TITLE = "Pastoral Care Tracker - Follow-ups & Timeline"
APP_VERSION = "1.0.0"

# Placeholder for records whose member was deleted
DELETED_MEMBER_NAME = "(삭제됨)"

# Record type labels
VISIT_TYPE_LABELS = {
    "sick": "병문안",
    "new_family": "새가족",
    "regular": "정기심방",
    "crisis": "위기심방",
    "celebration": "경조사",
    "routine": "일반방문",
}

COUNSEL_TYPE_LABELS = {
    "family": "가정",
    "faith": "신앙",
    "career": "진로",
    "health": "건강",
    "finance": "재정",
    "other": "기타",
}

VISIT_STATUS_LABELS = {
    "scheduled": "예정",
    "completed": "완료",
    "pending": "보류",
    "cancelled": "취소",
}

PRAYER_CATEGORY_LABELS = {
    "health": "건강",
    "family": "가정",
    "career": "진로",
    "faith": "신앙",
    "settlement": "정착",
    "mission": "선교",
    "other": "기타",
}

PRAYER_STATUS_LABELS = {"active": "기도 중", "answered": "응답됨"}

MEMO_CATEGORY_LABELS = {
    "admin": "행정",
    "assignment": "배정",
    "connection": "연결",
    "notable": "특이사항",
    "other": "기타",
}

# Follow-up queue tabs
QUEUE_TAB_LABELS = {
    "all": "전체",
    "overdue": "기한 초과",
    "today": "오늘",
    "upcoming": "예정",
    "done": "완료",
}

KIND_ICONS = {
    "visit": "🏠",
    "counsel": "💬",
    "prayer": "🙏",
    "memo": "📝",
}
