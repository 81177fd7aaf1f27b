from fastapi import Depends, HTTPException, status

from gradetrack.core.deps import get_current_user
from gradetrack.schemas.assignment import Assignment
from gradetrack.schemas.user import Identity


def require_instructor(current_user: Identity = Depends(get_current_user)) -> Identity:
    if current_user.role != "instructor":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor role required",
        )
    return current_user


def require_student(current_user: Identity = Depends(get_current_user)) -> Identity:
    if current_user.role != "student":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student role required",
        )
    return current_user


def ensure_owner(assignment: Assignment, instructor: Identity) -> None:
    if assignment.instructor_id != instructor.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owning instructor can do this",
        )
