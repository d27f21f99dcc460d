from __future__ import annotations
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from errors import (
    DuplicateAcceptError,
    InvalidIdError,
    JobServiceError,
    NotFoundError,
    NotFoundOrUnauthorizedError,
    SelfAcceptError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from repositories.job_repository import DEFAULT_LATEST_LIMIT, JobRepository

bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")

STATUS_BY_ERROR = {
    ValidationError: 400,
    InvalidIdError: 400,
    UnauthorizedError: 403,
    SelfAcceptError: 403,
    NotFoundError: 404,
    NotFoundOrUnauthorizedError: 404,
    DuplicateAcceptError: 409,
    StorageError: 500,
}

FAILURE_MESSAGES = {
    "jobs.latest_jobs": "Failed to fetch latest jobs",
    "jobs.list_jobs": "Failed to fetch jobs",
    "jobs.jobs_by_category": "Failed to fetch jobs by category",
    "jobs.my_jobs": "Failed to fetch user jobs",
    "jobs.get_job": "Failed to fetch job",
    "jobs.create_job": "Failed to add job",
    "jobs.update_job": "Failed to update job",
    "jobs.delete_job": "Failed to delete job",
    "jobs.accept_job": "Failed to accept job",
    "jobs.accepted_jobs": "Failed to fetch accepted jobs",
    "jobs.remove_accepted_job": "Failed to remove accepted job",
    "jobs.stats": "Failed to fetch statistics",
}


def _repo() -> JobRepository:
    return current_app.extensions["job_repository"]


def _body() -> Dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _list(items):
    return jsonify({"success": True, "count": len(items), "data": [i.to_dict() for i in items]})


def _require(body: Dict[str, Any], fields, message: str):
    missing = [f for f in fields if not body.get(f)]
    if missing:
        raise ValidationError(message, missing)


@bp.errorhandler(JobServiceError)
def handle_job_error(e: JobServiceError):
    status = STATUS_BY_ERROR.get(type(e), 500)
    if status == 500:
        logger.exception(f"{request.method} {request.path} failed")
    payload: Dict[str, Any] = {
        "success": False,
        "message": FAILURE_MESSAGES.get(request.endpoint, e.message),
        "error": e.message,
    }
    if isinstance(e, ValidationError) and e.missing_fields:
        payload["missingFields"] = e.missing_fields
    return jsonify(payload), status


@bp.get("/latest")
def latest_jobs():
    """
    Latest Jobs
    ---
    tags: [Jobs]
    parameters:
      - name: limit
        in: query
        type: integer
        default: 6
    responses:
      200:
        description: Most recently posted jobs, newest first
        schema:
          $ref: '#/definitions/JobList'
    """
    limit = request.args.get("limit", type=int)
    if not limit or limit < 1:
        limit = DEFAULT_LATEST_LIMIT
    return _list(_repo().get_latest_jobs(limit))


@bp.get("")
@bp.get("/")
def list_jobs():
    """
    List Jobs
    ---
    tags: [Jobs]
    parameters:
      - name: sortBy
        in: query
        type: string
        default: postedDate
      - name: sortOrder
        in: query
        type: string
        enum: [asc, desc]
        default: desc
    responses:
      200:
        description: All jobs
        schema:
          $ref: '#/definitions/JobList'
    definitions:
      Job:
        type: object
        properties:
          _id: { type: string }
          title: { type: string }
          postedBy: { type: string }
          category: { type: string }
          summary: { type: string }
          coverImage: { type: string }
          userEmail: { type: string }
          postedDate: { type: string, format: date-time }
          createdAt: { type: string, format: date-time }
          updatedAt: { type: string, format: date-time }
      JobList:
        type: object
        properties:
          success: { type: boolean }
          count: { type: integer }
          data:
            type: array
            items:
              $ref: '#/definitions/Job'
      AcceptedJob:
        type: object
        properties:
          _id: { type: string }
          jobId: { type: string }
          jobTitle: { type: string }
          jobCategory: { type: string }
          jobSummary: { type: string }
          jobCoverImage: { type: string }
          jobPostedBy: { type: string }
          jobOwnerEmail: { type: string }
          acceptedByEmail: { type: string }
          acceptedByName: { type: string }
          acceptedDate: { type: string, format: date-time }
          status: { type: string, enum: [accepted] }
      Error:
        type: object
        properties:
          success: { type: boolean }
          message: { type: string }
          error: { type: string }
    """
    sort_by = request.args.get("sortBy", default="postedDate", type=str) or "postedDate"
    order = ASCENDING if request.args.get("sortOrder") == "asc" else DESCENDING
    return _list(_repo().get_all_jobs(sort_by, order))


@bp.get("/category/<category>")
def jobs_by_category(category: str):
    """
    Jobs by Category
    ---
    tags: [Jobs]
    parameters:
      - name: category
        in: path
        type: string
        required: true
    responses:
      200:
        description: Jobs in the category, newest first
        schema:
          $ref: '#/definitions/JobList'
    """
    return _list(_repo().get_jobs_by_category(category))


@bp.get("/my-jobs/<email>")
def my_jobs(email: str):
    """
    Jobs Posted by a User
    ---
    tags: [Jobs]
    parameters:
      - name: email
        in: path
        type: string
        required: true
    responses:
      200:
        description: Jobs owned by the email, newest first
        schema:
          $ref: '#/definitions/JobList'
    """
    return _list(_repo().get_jobs_by_user(email))


@bp.get("/<job_id>")
def get_job(job_id: str):
    """
    Get Job by ID
    ---
    tags: [Jobs]
    parameters:
      - name: job_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Job
      400:
        description: Invalid ID
        schema:
          $ref: '#/definitions/Error'
      404:
        description: Not Found
        schema:
          $ref: '#/definitions/Error'
    """
    job = _repo().get_job_by_id(job_id)
    return jsonify({"success": True, "data": job.to_dict()})


@bp.post("")
@bp.post("/")
def create_job():
    """
    Create Job
    ---
    tags: [Jobs]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, postedBy, category, summary, coverImage, userEmail]
          properties:
            title: { type: string }
            postedBy: { type: string }
            category: { type: string }
            summary: { type: string }
            coverImage: { type: string }
            userEmail: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Missing required fields
        schema:
          $ref: '#/definitions/Error'
    """
    inserted_id = _repo().add_job(_body())
    return jsonify({
        "success": True,
        "message": "Job added successfully",
        "data": {"insertedId": inserted_id},
    }), 201


@bp.put("/<job_id>")
def update_job(job_id: str):
    """
    Update Job
    ---
    tags: [Jobs]
    parameters:
      - name: job_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [userEmail]
          properties:
            userEmail: { type: string, description: Must match the job owner }
            title: { type: string }
            postedBy: { type: string }
            category: { type: string }
            summary: { type: string }
            coverImage: { type: string }
    responses:
      200:
        description: Updated
      400:
        description: Invalid ID or missing userEmail
      403:
        description: Not the owner
      404:
        description: Not Found
    """
    body = _body()
    _require(body, ["userEmail"], "User email is required for authorization")
    user_email = body.pop("userEmail")
    modified = _repo().update_job(job_id, user_email, body)
    return jsonify({
        "success": True,
        "message": "Job updated successfully",
        "data": {"modifiedCount": modified},
    })


@bp.delete("/<job_id>")
def delete_job(job_id: str):
    """
    Delete Job
    ---
    tags: [Jobs]
    description: Also removes every acceptance of the job.
    parameters:
      - name: job_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [userEmail]
          properties:
            userEmail: { type: string }
    responses:
      200:
        description: Deleted
      400:
        description: Invalid ID or missing userEmail
      403:
        description: Not the owner
      404:
        description: Not Found
    """
    body = _body()
    _require(body, ["userEmail"], "User email is required for authorization")
    deleted = _repo().delete_job(job_id, body["userEmail"])
    return jsonify({
        "success": True,
        "message": "Job deleted successfully",
        "data": {"deletedCount": deleted},
    })


@bp.post("/accept")
def accept_job():
    """
    Accept Job
    ---
    tags: [Accepted Jobs]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [jobId, userEmail, userName]
          properties:
            jobId: { type: string }
            userEmail: { type: string }
            userName: { type: string }
    responses:
      201:
        description: Accepted
      400:
        description: Invalid ID or missing fields
      403:
        description: Own job posting
      404:
        description: Job not found
      409:
        description: Already accepted
    """
    body = _body()
    _require(body, ["jobId", "userEmail", "userName"], "jobId, userEmail, and userName are required")
    inserted_id = _repo().accept_job(body["jobId"], body["userEmail"], body["userName"])
    return jsonify({
        "success": True,
        "message": "Job accepted successfully",
        "data": {"insertedId": inserted_id},
    }), 201


@bp.get("/accepted/<email>")
def accepted_jobs(email: str):
    """
    Accepted Jobs of a User
    ---
    tags: [Accepted Jobs]
    parameters:
      - name: email
        in: path
        type: string
        required: true
    responses:
      200:
        description: Accepted jobs, most recent first
        schema:
          type: object
          properties:
            success: { type: boolean }
            count: { type: integer }
            data:
              type: array
              items:
                $ref: '#/definitions/AcceptedJob'
    """
    return _list(_repo().get_accepted_jobs_by_user(email))


@bp.delete("/accepted/<accepted_job_id>")
def remove_accepted_job(accepted_job_id: str):
    """
    Remove Accepted Job
    ---
    tags: [Accepted Jobs]
    parameters:
      - name: accepted_job_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [userEmail]
          properties:
            userEmail: { type: string, description: Must match the acceptor }
    responses:
      200:
        description: Removed
      400:
        description: Invalid ID or missing userEmail
      404:
        description: Not found or not the acceptor
    """
    body = _body()
    _require(body, ["userEmail"], "User email is required for authorization")
    deleted = _repo().remove_accepted_job(accepted_job_id, body["userEmail"])
    return jsonify({
        "success": True,
        "message": "Accepted job removed successfully",
        "data": {"deletedCount": deleted},
    })


@bp.get("/stats/all")
def stats():
    """
    Statistics
    ---
    tags: [Meta]
    responses:
      200:
        description: Totals and job counts per category
        schema:
          type: object
          properties:
            success: { type: boolean }
            data:
              type: object
              properties:
                totalJobs: { type: integer }
                totalAcceptedJobs: { type: integer }
                categoryCounts:
                  type: array
                  items:
                    type: object
                    properties:
                      category: { type: string }
                      count: { type: integer }
    """
    return jsonify({"success": True, "data": _repo().get_stats()})
