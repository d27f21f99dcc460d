"""
Jobs Repository.

Owns the ``jobs`` and ``acceptedJobs`` collections. Every operation checks
its inputs and ownership before touching the store and raises one of the
errors in ``errors``. Nothing here is transactional: read-then-write checks
and the delete cascade can race with concurrent requests.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from errors import (
    DuplicateAcceptError,
    InvalidIdError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    SelfAcceptError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from models.job import (
    IMMUTABLE_JOB_FIELDS,
    REQUIRED_JOB_FIELDS,
    AcceptedJob,
    Job,
    is_blank,
    missing_fields,
)

JOBS_COLLECTION = "jobs"
ACCEPTED_JOBS_COLLECTION = "acceptedJobs"
DEFAULT_LATEST_LIMIT = 6


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any, label: str = "job") -> ObjectId:
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdError(f"Invalid {label} ID format")
    return ObjectId(value)


@contextmanager
def storage(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error(f"Failed to {action}: {e}")
        raise StorageError(f"Failed to {action}: {e}") from e


class JobRepository:
    def __init__(self, db: Database, clock: Callable[[], datetime] = utcnow):
        self.jobs = db[JOBS_COLLECTION]
        self.accepted_jobs = db[ACCEPTED_JOBS_COLLECTION]
        self.clock = clock

    def create_indexes(self) -> None:
        """Create the lookup indexes on ``jobs``; failures are only logged."""
        try:
            self.jobs.create_index([("userEmail", ASCENDING)])
            self.jobs.create_index([("category", ASCENDING)])
            self.jobs.create_index([("postedDate", DESCENDING)])
            logger.info("Database indexes created")
        except PyMongoError as e:
            logger.error(f"Index creation error: {e}")

    # ---------------------------------------------------------------- jobs

    def add_job(self, data: Dict[str, Any]) -> str:
        missing = missing_fields(data, REQUIRED_JOB_FIELDS)
        if missing:
            raise ValidationError.missing(missing)

        job = Job.new(data, self.clock())
        with storage("add job"):
            result = self.jobs.insert_one(job.to_document())
        logger.debug(f"Job {result.inserted_id} added by {job.user_email}")
        return str(result.inserted_id)

    def get_all_jobs(self, sort_field: str = "postedDate", sort_direction: int = DESCENDING) -> List[Job]:
        with storage("fetch jobs"):
            docs = list(self.jobs.find({}).sort(sort_field, sort_direction))
        return [Job.from_document(d) for d in docs]

    def get_latest_jobs(self, limit: int = DEFAULT_LATEST_LIMIT) -> List[Job]:
        with storage("fetch latest jobs"):
            docs = list(self.jobs.find({}).sort("postedDate", DESCENDING).limit(limit))
        return [Job.from_document(d) for d in docs]

    def get_jobs_by_category(self, category: str) -> List[Job]:
        with storage("fetch jobs by category"):
            docs = list(self.jobs.find({"category": category}).sort("postedDate", DESCENDING))
        return [Job.from_document(d) for d in docs]

    def get_job_by_id(self, job_id: str) -> Job:
        oid = to_object_id(job_id)
        with storage("fetch job"):
            doc = self.jobs.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError("Job not found")
        return Job.from_document(doc)

    def get_jobs_by_user(self, email: str) -> List[Job]:
        if is_blank(email):
            raise ValidationError("User email is required", ["userEmail"])
        with storage("fetch user jobs"):
            docs = list(self.jobs.find({"userEmail": email}).sort("postedDate", DESCENDING))
        return [Job.from_document(d) for d in docs]

    def update_job(self, job_id: str, requester_email: str, fields: Dict[str, Any]) -> int:
        oid = to_object_id(job_id)
        job_id = str(oid)
        existing = self.get_job_by_id(job_id)
        if existing.user_email != requester_email:
            raise UnauthorizedError("Unauthorized: You can only update your own jobs")

        changes = {k: v for k, v in fields.items() if k not in IMMUTABLE_JOB_FIELDS}
        changes["updatedAt"] = self.clock()
        with storage("update job"):
            result = self.jobs.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError("Job not found")
        logger.debug(f"Job {job_id} updated by {requester_email}: {sorted(changes)}")
        return result.modified_count

    def delete_job(self, job_id: str, requester_email: str) -> int:
        oid = to_object_id(job_id)
        job_id = str(oid)
        existing = self.get_job_by_id(job_id)
        if existing.user_email != requester_email:
            raise UnauthorizedError("Unauthorized: You can only delete your own jobs")

        with storage("delete job"):
            result = self.jobs.delete_one({"_id": oid})
            cascade = self.accepted_jobs.delete_many({"jobId": job_id})
        logger.debug(f"Job {job_id} deleted, {cascade.deleted_count} acceptance(s) removed")
        return result.deleted_count

    # ------------------------------------------------------- accepted jobs

    def accept_job(self, job_id: str, acceptor_email: str, acceptor_name: str) -> str:
        # jobId is stored in canonical lowercase hex
        job_id = str(to_object_id(job_id))
        missing = [name for name, value in (("userEmail", acceptor_email), ("userName", acceptor_name)) if is_blank(value)]
        if missing:
            raise ValidationError.missing(missing)

        job = self.get_job_by_id(job_id)
        if job.user_email == acceptor_email:
            raise SelfAcceptError("You cannot accept your own job posting")

        with storage("check existing acceptance"):
            existing = self.accepted_jobs.find_one({"jobId": job_id, "acceptedByEmail": acceptor_email})
        if existing is not None:
            raise DuplicateAcceptError("You have already accepted this job")

        accepted = AcceptedJob.snapshot(job, acceptor_email, acceptor_name, self.clock())
        with storage("accept job"):
            result = self.accepted_jobs.insert_one(accepted.to_document())
        logger.debug(f"Job {job_id} accepted by {acceptor_email}")
        return str(result.inserted_id)

    def get_accepted_jobs_by_user(self, email: str) -> List[AcceptedJob]:
        if is_blank(email):
            raise ValidationError("User email is required", ["userEmail"])
        with storage("fetch accepted jobs"):
            docs = list(self.accepted_jobs.find({"acceptedByEmail": email}).sort("acceptedDate", DESCENDING))
        return [AcceptedJob.from_document(d) for d in docs]

    def remove_accepted_job(self, accepted_job_id: str, requester_email: str) -> int:
        oid = to_object_id(accepted_job_id, "accepted job")
        with storage("remove accepted job"):
            result = self.accepted_jobs.delete_one({"_id": oid, "acceptedByEmail": requester_email})
        if result.deleted_count == 0:
            raise NotFoundOrUnauthorizedError("Accepted job not found or unauthorized")
        return result.deleted_count

    # --------------------------------------------------------------- stats

    def get_stats(self) -> Dict[str, Any]:
        pipeline = [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"count": DESCENDING}},
        ]
        with storage("fetch statistics"):
            total_jobs = self.jobs.count_documents({})
            total_accepted = self.accepted_jobs.count_documents({})
            groups = list(self.jobs.aggregate(pipeline))
        return {
            "totalJobs": total_jobs,
            "totalAcceptedJobs": total_accepted,
            "categoryCounts": [{"category": g["_id"], "count": g["count"]} for g in groups],
        }
