"""
Tests for models/job.py - document <-> model conversion.
"""

from datetime import datetime, timezone

from bson import ObjectId

from models.job import AcceptedJob, Job, missing_fields, REQUIRED_JOB_FIELDS

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestJob:
    def test_new_stamps_dates_and_keeps_extra_fields(self, job_data):
        job = Job.new({**job_data, "budget": 500, "_id": "client-id"}, NOW)

        assert job.posted_date == job.created_at == job.updated_at == NOW
        assert job.extra == {"budget": 500}
        assert job.id is None

    def test_to_document_flattens_extra(self, job_data):
        doc = Job.new({**job_data, "budget": 500}, NOW).to_document()

        assert doc["budget"] == 500
        assert doc["userEmail"] == "alice@example.com"
        assert doc["postedDate"] == NOW
        assert "extra" not in doc

    def test_from_document_splits_known_and_extra(self):
        oid = ObjectId()
        job = Job.from_document({
            "_id": oid,
            "title": "Logo",
            "userEmail": "bob@example.com",
            "deadline": "2024-06-01",
        })

        assert job.id == str(oid)
        assert job.title == "Logo"
        assert job.summary == ""
        assert job.extra == {"deadline": "2024-06-01"}

    def test_to_dict_is_json_ready(self, job_data):
        oid = ObjectId()
        doc = Job.new({**job_data, "refs": [oid]}, NOW).to_document()
        doc["_id"] = oid

        out = Job.from_document(doc).to_dict()

        assert out["_id"] == str(oid)
        assert out["postedDate"] == NOW.isoformat()
        assert out["refs"] == [str(oid)]


class TestMissingFields:
    def test_reports_absent_and_blank_fields(self, job_data):
        data = dict(job_data, title="   ", coverImage=None)
        del data["category"]

        assert missing_fields(data, REQUIRED_JOB_FIELDS) == ["title", "category", "coverImage"]

    def test_falsy_non_strings_count_as_missing(self, job_data):
        data = dict(job_data, title=0, summary=False, coverImage=[])

        assert missing_fields(data, REQUIRED_JOB_FIELDS) == ["title", "summary", "coverImage"]

    def test_valid_data_has_no_missing_fields(self, job_data):
        assert missing_fields(job_data, REQUIRED_JOB_FIELDS) == []


class TestAcceptedJob:
    def test_snapshot_copies_job_fields(self, job_data):
        job = Job.new(job_data, NOW)
        job.id = str(ObjectId())

        accepted = AcceptedJob.snapshot(job, "carol@example.com", "Carol", NOW)
        doc = accepted.to_document()

        assert doc["jobId"] == job.id
        assert doc["jobTitle"] == job.title
        assert doc["jobCategory"] == job.category
        assert doc["jobSummary"] == job.summary
        assert doc["jobCoverImage"] == job.cover_image
        assert doc["jobPostedBy"] == job.posted_by
        assert doc["jobOwnerEmail"] == job.user_email
        assert doc["acceptedByEmail"] == "carol@example.com"
        assert doc["acceptedByName"] == "Carol"
        assert doc["acceptedDate"] == NOW
        assert doc["status"] == "accepted"

    def test_jobid_is_stored_as_string(self, job_data):
        job = Job.new(job_data, NOW)
        job.id = str(ObjectId())

        doc = AcceptedJob.snapshot(job, "carol@example.com", "Carol", NOW).to_document()

        assert isinstance(doc["jobId"], str)
