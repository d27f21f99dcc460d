from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId

# wire/document name -> attribute name
JOB_FIELDS = {
    "title": "title",
    "postedBy": "posted_by",
    "category": "category",
    "summary": "summary",
    "coverImage": "cover_image",
    "userEmail": "user_email",
    "postedDate": "posted_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

REQUIRED_JOB_FIELDS = ["title", "postedBy", "category", "summary", "coverImage", "userEmail"]

# never taken from an update request
IMMUTABLE_JOB_FIELDS = {"_id", "id", "postedDate", "userEmail", "createdAt"}

ACCEPTED_JOB_FIELDS = {
    "jobId": "job_id",
    "jobTitle": "job_title",
    "jobCategory": "job_category",
    "jobSummary": "job_summary",
    "jobCoverImage": "job_cover_image",
    "jobPostedBy": "job_posted_by",
    "jobOwnerEmail": "job_owner_email",
    "acceptedByEmail": "accepted_by_email",
    "acceptedByName": "accepted_by_name",
    "acceptedDate": "accepted_date",
    "status": "status",
}

STATUS_ACCEPTED = "accepted"


def is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() == ""
    return not value


def missing_fields(data: Dict[str, Any], required: List[str]) -> List[str]:
    return [f for f in required if is_blank(data.get(f))]


def jsonable(value: Any) -> Any:
    """Make a stored value safe for ``jsonify``."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value


@dataclass
class Job:
    title: str
    posted_by: str
    category: str
    summary: str
    cover_image: str
    user_email: str
    posted_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, data: Dict[str, Any], now: datetime) -> "Job":
        """Build a job from request data, stamping the creation dates."""
        extra = {k: v for k, v in data.items() if k not in JOB_FIELDS and k not in IMMUTABLE_JOB_FIELDS}
        return cls(
            title=data["title"],
            posted_by=data["postedBy"],
            category=data["category"],
            summary=data["summary"],
            cover_image=data["coverImage"],
            user_email=data["userEmail"],
            posted_date=now,
            created_at=now,
            updated_at=now,
            extra=extra,
        )

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Job":
        values = {attr: doc.get(name) for name, attr in JOB_FIELDS.items()}
        for attr in ("title", "posted_by", "category", "summary", "cover_image", "user_email"):
            if values[attr] is None:
                values[attr] = ""
        extra = {k: v for k, v in doc.items() if k != "_id" and k not in JOB_FIELDS}
        return cls(id=str(doc["_id"]) if "_id" in doc else None, extra=extra, **values)

    def to_document(self) -> Dict[str, Any]:
        doc = dict(self.extra)
        doc.update({name: getattr(self, attr) for name, attr in JOB_FIELDS.items()})
        return doc

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"_id": self.id}
        out.update(jsonable(self.to_document()))
        return out


@dataclass
class AcceptedJob:
    job_id: str
    job_title: str
    job_category: str
    job_summary: str
    job_cover_image: str
    job_posted_by: str
    job_owner_email: str
    accepted_by_email: str
    accepted_by_name: str
    accepted_date: Optional[datetime] = None
    status: str = STATUS_ACCEPTED
    id: Optional[str] = None

    @classmethod
    def snapshot(cls, job: Job, email: str, name: str, now: datetime) -> "AcceptedJob":
        """Copy the job fields shown to the acceptor; they are not refreshed later."""
        return cls(
            job_id=job.id,
            job_title=job.title,
            job_category=job.category,
            job_summary=job.summary,
            job_cover_image=job.cover_image,
            job_posted_by=job.posted_by,
            job_owner_email=job.user_email,
            accepted_by_email=email,
            accepted_by_name=name,
            accepted_date=now,
        )

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "AcceptedJob":
        values = {attr: doc.get(name) for name, attr in ACCEPTED_JOB_FIELDS.items()}
        if values["status"] is None:
            values["status"] = STATUS_ACCEPTED
        return cls(id=str(doc["_id"]) if "_id" in doc else None, **values)

    def to_document(self) -> Dict[str, Any]:
        return {name: getattr(self, attr) for name, attr in ACCEPTED_JOB_FIELDS.items()}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"_id": self.id}
        out.update(jsonable(self.to_document()))
        return out
