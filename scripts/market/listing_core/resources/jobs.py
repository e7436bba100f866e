"""Job postings, applications and interviews."""

from __future__ import annotations

from collections import Counter

from listing_core.formatting import display_date, format_money, same_day, status_label
from listing_core.resources.base import CategoricalFilter, Column, ResourceDescriptor, SortOption

APPLICATION_STATUSES = {
    "Pending": "PENDING",
    "Reviewed": "REVIEWED",
    "Shortlisted": "SHORTLISTED",
    "Interviewed": "INTERVIEWED",
    "Offered": "OFFERED",
    "Hired": "HIRED",
    "Rejected": "REJECTED",
    "Withdrawn": "WITHDRAWN",
}


def _salary(job: dict) -> str:
    low = job.get("salaryMin")
    high = job.get("salaryMax")
    if low and high:
        return f"{format_money(low)} - {format_money(high)}"
    if low or high:
        return format_money(low or high)
    return "-"


def normalize_job(job: dict) -> dict:
    employer = job.get("employer") or {}
    counts = job.get("_count") or {}
    city = job.get("city")
    return {
        "id": str(job.get("id")),
        "title": job.get("title") or "",
        "company": job.get("companyName") or employer.get("name") or "",
        "location": f"{city}, {job['state']}" if city and job.get("state") else (city or "Remote"),
        "jobType": str(job.get("jobType") or "FULL_TIME").upper(),
        "salaryMin": job.get("salaryMin"),
        "salaryMax": job.get("salaryMax"),
        "salary": _salary(job),
        "status": str(job.get("status") or "ACTIVE").upper(),
        "featured": bool(job.get("featured")),
        "applications": int(counts.get("applications") or job.get("applications") or 0),
        "postedAt": job.get("postedAt") or job.get("createdAt"),
    }


JOB_SOURCES = {
    "company": ("companyName", "employer"),
    "location": ("city", "state"),
    "salary": ("salaryMin", "salaryMax"),
    "applications": ("_count", "applications"),
    "postedAt": ("postedAt", "createdAt"),
}


def job_defaults(fields: dict) -> dict:
    return {
        "company": "",
        "location": "Remote",
        "jobType": "FULL_TIME",
        "status": "DRAFT",
        "featured": False,
        "applications": 0,
    }


def summarize_jobs(jobs: list[dict]) -> dict:
    counts = Counter(j.get("status") for j in jobs)
    return {
        "total": len(jobs),
        "active": counts.get("ACTIVE", 0),
        "closed": counts.get("CLOSED", 0),
        "featured": sum(1 for j in jobs if j.get("featured")),
        "applications": sum(int(j.get("applications") or 0) for j in jobs),
    }


JOBS = ResourceDescriptor(
    key="jobs",
    title="Jobs",
    path="/api/jobs",
    list_key="jobs",
    scope_params={"limit": "100"},
    role_scopes={"EMPLOYER": {"employerId": "user_id"}},
    columns=(
        Column("Title", "title"),
        Column("Company", "company"),
        Column("Location", "location"),
        Column("Type", "jobType", status_label),
        Column("Salary", "salary"),
        Column("Applications", "applications"),
        Column("Status", "status", status_label),
        Column("Posted", "postedAt", display_date),
    ),
    search_fields=("title", "company", "location"),
    filters=(
        CategoricalFilter(
            "status",
            "status",
            {"Active": "ACTIVE", "Draft": "DRAFT", "Closed": "CLOSED", "Paused": "PAUSED"},
            all_label="All Status",
        ),
        CategoricalFilter(
            "type",
            "jobType",
            {
                "Full Time": "FULL_TIME",
                "Part Time": "PART_TIME",
                "Contract": "CONTRACT",
                "Internship": "INTERNSHIP",
                "Remote": "REMOTE",
            },
            all_label="All Types",
        ),
    ),
    sorts=(
        SortOption("Recently Posted", "postedAt", descending=True, kind="date"),
        SortOption("Most Applications", "applications", descending=True, kind="number"),
        SortOption("Highest Salary", "salaryMax", descending=True, kind="number"),
    ),
    normalize=normalize_job,
    field_sources=JOB_SOURCES,
    item_keys=("job",),
    defaults=job_defaults,
    required_fields=("title",),
    numeric_fields=("salaryMin", "salaryMax"),
    summarize=summarize_jobs,
)


def normalize_application(application: dict) -> dict:
    job = application.get("job") or {}
    applicant = application.get("applicant") or {}
    return {
        "id": str(application.get("id")),
        "applicant": applicant.get("name") or "",
        "email": applicant.get("email") or "",
        "jobTitle": job.get("title") or "",
        "company": job.get("companyName") or "",
        "status": str(application.get("status") or "PENDING").upper(),
        "notes": application.get("notes") or "",
        "appliedAt": application.get("createdAt") or application.get("appliedAt"),
    }


APPLICATION_SOURCES = {
    "applicant": ("applicant",),
    "email": ("applicant",),
    "jobTitle": ("job",),
    "company": ("job",),
    "appliedAt": ("createdAt", "appliedAt"),
}


APPLICATIONS = ResourceDescriptor(
    key="applications",
    title="Job Applications",
    path="/api/job-applications",
    list_key="applications",
    role_scopes={"BUYER": {"applicantId": "user_id"}, "EMPLOYER": {"employerId": "user_id"}},
    columns=(
        Column("Applicant", "applicant"),
        Column("Email", "email"),
        Column("Job", "jobTitle"),
        Column("Company", "company"),
        Column("Status", "status", status_label),
        Column("Applied", "appliedAt", display_date),
    ),
    search_fields=("applicant", "email", "jobTitle", "company"),
    filters=(CategoricalFilter("status", "status", APPLICATION_STATUSES, all_label="All Status"),),
    sorts=(
        SortOption("Newest", "appliedAt", descending=True, kind="date"),
        SortOption("Oldest", "appliedAt", kind="date"),
    ),
    normalize=normalize_application,
    field_sources=APPLICATION_SOURCES,
    item_keys=("application",),
    required_fields=("jobTitle",),
    writable=("update",),
    write_method="PATCH",
    id_field="applicationId",
)


def normalize_interview(interview: dict) -> dict:
    return {
        "id": str(interview.get("id")),
        "candidateName": interview.get("candidateName") or "",
        "candidateEmail": interview.get("candidateEmail") or "",
        "jobTitle": interview.get("jobTitle") or "",
        "date": interview.get("date"),
        "time": interview.get("time") or "",
        "type": interview.get("type") or "Video Call",
        "round": interview.get("round") or "",
        "status": str(interview.get("status") or "SCHEDULED").upper(),
        "notes": interview.get("notes") or "",
    }


def interview_defaults(fields: dict) -> dict:
    return {"type": "Video Call", "round": "", "status": "SCHEDULED", "notes": ""}


def summarize_interviews(interviews: list[dict]) -> dict:
    counts = Counter(i.get("status") for i in interviews)
    return {
        "total": len(interviews),
        "scheduled": counts.get("SCHEDULED", 0),
        "completed": counts.get("COMPLETED", 0),
        "cancelled": counts.get("CANCELLED", 0),
    }


INTERVIEWS = ResourceDescriptor(
    key="interviews",
    title="Interviews",
    path="/api/interviews",
    list_key="interviews",
    role_scopes={"BUYER": {"candidateId": "user_id"}, "EMPLOYER": {"employerId": "user_id"}},
    columns=(
        Column("Candidate", "candidateName"),
        Column("Job", "jobTitle"),
        Column("Date", "date", display_date),
        Column("Time", "time"),
        Column("Type", "type"),
        Column("Round", "round"),
        Column("Status", "status", status_label),
    ),
    search_fields=("candidateName", "jobTitle"),
    filters=(
        CategoricalFilter(
            "status",
            "status",
            {"Scheduled": "SCHEDULED", "Completed": "COMPLETED", "Cancelled": "CANCELLED", "No Show": "NO_SHOW"},
            all_label="All",
        ),
        # label is a calendar day (2025-11-28); rows match on the same day
        CategoricalFilter("date", "date", None, all_label="Any Date", matcher=same_day),
    ),
    sorts=(
        SortOption("Soonest", "date", kind="date"),
        SortOption("Latest", "date", descending=True, kind="date"),
    ),
    normalize=normalize_interview,
    item_keys=("interview",),
    defaults=interview_defaults,
    required_fields=("candidateName", "jobTitle", "date"),
    summarize=summarize_interviews,
)
