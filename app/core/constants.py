"""Application constants.

Contains the Notion property schema for candidate records, pipeline status
vocabularies, and metric thresholds.
"""

# ---------------------------------------------------------------------------
# Notion property schema
# Maps each Notion property name to (Candidate attribute, expected value type).
# Value types: "text", "number", "boolean", "timestamp".
# ---------------------------------------------------------------------------
CANDIDATE_FIELDS: dict[str, tuple[str, str]] = {
    "Name": ("name", "text"),
    "Role": ("role", "text"),
    "Status": ("status", "text"),
    "Priority": ("priority", "text"),
    "Stratification": ("stratification", "text"),
    "Hot Candidate?": ("hot_candidate", "text"),
    "Hours Since Last Activity": ("hours_since_last_activity", "number"),
    "Latest Communication": ("latest_communication", "text"),
    "Linkedin Profile": ("linkedin_profile", "text"),
    "Interview Status": ("interview_status", "text"),
    "AI Score": ("ai_score", "number"),
    "Human Score": ("human_score", "number"),
    "Date Added": ("date_added", "timestamp"),
    "AI Processed At": ("ai_processed_at", "timestamp"),
    "CV Verified by Lynn": ("cv_verified_by_lynn", "timestamp"),
    "Passed Human Filter": ("passed_human_filter", "boolean"),
}

VALUE_TYPES: frozenset[str] = frozenset({"text", "number", "boolean", "timestamp"})

# Property names used in server-side filters and sorts
PROP_NAME = "Name"
PROP_STATUS = "Status"
PROP_PRIORITY = "Priority"
PROP_STRATIFICATION = "Stratification"
PROP_HOT_CANDIDATE = "Hot Candidate?"
PROP_HOURS_SINCE_LAST_ACTIVITY = "Hours Since Last Activity"
PROP_INTERVIEW_STATUS = "Interview Status"
PROP_AI_SCORE = "AI Score"
PROP_DATE_ADDED = "Date Added"
PROP_AI_PROCESSED_AT = "AI Processed At"
PROP_CV_VERIFIED = "CV Verified by Lynn"
PROP_PASSED_HUMAN_FILTER = "Passed Human Filter"

UNKNOWN_NAME = "Unknown"
UNKNOWN_ROLE = "Unknown"

# ---------------------------------------------------------------------------
# High-value candidate labels
# ---------------------------------------------------------------------------
HOT_CANDIDATE_LABEL = "Hot Candidate 🔥"
TOP_PRIORITY = "1st"
HIGH_STRATIFICATION = "H"

# ---------------------------------------------------------------------------
# Pipeline statuses
# ---------------------------------------------------------------------------
STATUS_COMPANY_REJECTED = "Company Rejected"
STATUS_CANDIDATE_REJECTED = "Candidate Rejected"
STATUS_ACCEPTED = "Accepted"
INTERVIEW_COMPLETED = "Completed"

TERMINAL_STATUSES: frozenset[str] = frozenset({STATUS_COMPANY_REJECTED, STATUS_ACCEPTED})
REJECTED_STATUSES: frozenset[str] = frozenset(
    {STATUS_COMPANY_REJECTED, STATUS_CANDIDATE_REJECTED}
)

# Statuses that mean the candidate has reached an interview stage
INTERVIEW_STAGE_STATUSES: frozenset[str] = frozenset({
    "Initial Evaluation Call",
    "CEO Interview",
    "Tech Test Task",
    "Collab Writing",
    "Trial Period",
    "Exploratory Call",
    "Tech Interview",
    "Accepted",
})

# Screening statuses that make up the HR review backlog
HR_BACKLOG_STATUSES: frozenset[str] = frozenset({"HR Screening", "HM CV Screening"})

# Lowercase substrings of an Interview Status that count as "reached interview"
INTERVIEW_PROGRESS_MARKERS: tuple[str, ...] = (
    "scheduled",
    "completed",
    "phone screen",
    "on-site",
    "final round",
    "offer",
)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------
OVERDUE_AFTER_HOURS: float = 24
HIGH_AI_SCORE: float = 7
