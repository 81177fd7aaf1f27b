import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from gradetrack.core import config
from gradetrack.core.deps import get_current_user, get_tracker
from gradetrack.core.permissions import ensure_owner, require_instructor, require_student
from gradetrack.routers.assignments import _ensure_assignment_exists
from gradetrack.schemas.submission import Submission, SubmissionCreate, SubmissionGradeUpdate
from gradetrack.schemas.user import Identity
from gradetrack.services.files import URL_PREFIX
from gradetrack.services.tracker import Tracker

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_submission_exists(tracker: Tracker, submission_id: str) -> Submission:
    s = tracker.submissions.get_by_id(submission_id)
    if not s:
        raise HTTPException(status_code=404, detail="Submission not found")
    return s


def _upload_size(upload: UploadFile) -> int:
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=Submission,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: str,
    file: UploadFile = File(...),
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_student),
):
    _ensure_assignment_exists(tracker, assignment_id)

    if not config.ALLOW_LATE_SUBMISSIONS and not tracker.rules.is_submission_allowed(assignment_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Submission closed: the deadline for this assignment has passed",
        )

    if file.content_type not in config.ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Please upload a PDF or Word document only")
    if _upload_size(file) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File size must be less than 10MB")

    if tracker.files is None:
        raise HTTPException(status_code=503, detail="File storage is not configured")

    resubmission = tracker.rules.has_student_submitted(assignment_id, me.id)
    file_url = tracker.files.store(file.filename, file.file)

    submission = tracker.submissions.create(
        SubmissionCreate(
            assignment_id=assignment_id,
            student_id=me.id,
            student_name=me.name,
            file_name=file.filename,
            file_url=file_url,
        )
    )
    if resubmission:
        logger.info("student %s resubmitted assignment %s", me.id, assignment_id)
    return submission


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=list[Submission],
)
def list_submissions_for_assignment(
    assignment_id: str,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    ensure_owner(_ensure_assignment_exists(tracker, assignment_id), instructor)
    return tracker.submissions.list_by_assignment(assignment_id)


@router.get("/submissions/me", response_model=list[Submission])
def my_submissions(
    tracker: Tracker = Depends(get_tracker),
    me: Identity = Depends(require_student),
):
    # newest first; among equal timestamps the later record comes first
    subs = list(reversed(tracker.submissions.list_by_student(me.id)))
    return sorted(subs, key=lambda s: s.submitted_at, reverse=True)


@router.get("/submissions/{submission_id}", response_model=Submission)
def get_submission(
    submission_id: str,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    sub = _ensure_submission_exists(tracker, submission_id)
    ensure_owner(_ensure_assignment_exists(tracker, sub.assignment_id), instructor)
    return sub


@router.patch("/submissions/{submission_id}/grade", response_model=Submission)
def grade_submission(
    submission_id: str,
    payload: SubmissionGradeUpdate,
    tracker: Tracker = Depends(get_tracker),
    instructor: Identity = Depends(require_instructor),
):
    sub = _ensure_submission_exists(tracker, submission_id)
    ensure_owner(_ensure_assignment_exists(tracker, sub.assignment_id), instructor)
    return tracker.submissions.grade(submission_id, payload.grade, payload.feedback)


@router.get(URL_PREFIX + "/{token}/{file_name}")
def download_file(
    token: str,
    file_name: str,
    tracker: Tracker = Depends(get_tracker),
    current_user: Identity = Depends(get_current_user),
):
    if tracker.files is None:
        raise HTTPException(status_code=404, detail="File not found")
    path = tracker.files.resolve(f"{URL_PREFIX}/{token}/{file_name}")
    return FileResponse(path, filename=file_name)
