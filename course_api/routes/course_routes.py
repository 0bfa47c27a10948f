import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session, joinedload

from course_api.auth.dependencies import get_current_user
from course_api.auth.schemas import UserProfile
from course_api.core.errors import Forbidden, NotFound
from course_api.core.validation import COURSE_REQUIRED_FIELDS, require_fields
from course_api.database import get_db
from course_api.models.course import Course

router = APIRouter(tags=['courses'])

logger = logging.getLogger(__name__)

COURSE_NOT_FOUND_MESSAGE = 'The course does not exist.'
COURSE_PATH_PREFIX = '/api/courses'


class CourseRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    estimated_time: str | None = None
    materials_needed: str | None = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: str
    estimated_time: str | None = None
    materials_needed: str | None = None
    user_id: int
    owner: UserProfile


def is_course_owner(course: Course, user: UserProfile) -> bool:
    return user.id == course.user_id


def get_course_or_404(course_id: int, db: Session) -> Course:
    course = db.query(Course).options(joinedload(Course.owner)).filter(Course.id == course_id).first()
    if course is None:
        raise NotFound(COURSE_NOT_FOUND_MESSAGE)
    return course


@router.get('/courses', response_model=list[CourseResponse])
def list_courses(db: Session = Depends(get_db)):
    return db.query(Course).options(joinedload(Course.owner)).order_by(Course.id.asc()).all()


@router.get('/courses/{course_id}', response_model=CourseResponse)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return get_course_or_404(course_id, db)


@router.post('/courses', status_code=status.HTTP_201_CREATED)
def create_course(
    data: CourseRequest | None = None,
    current_user: UserProfile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = data or CourseRequest()
    require_fields(data, COURSE_REQUIRED_FIELDS)

    course = Course(
        user_id=current_user.id,
        title=data.title.strip(),
        description=data.description.strip(),
        estimated_time=data.estimated_time,
        materials_needed=data.materials_needed,
    )
    db.add(course)
    db.commit()

    logger.info('User %s created course %s', current_user.id, course.id)
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={'Location': f'{COURSE_PATH_PREFIX}/{course.id}'},
    )


@router.put('/courses/{course_id}', status_code=status.HTTP_204_NO_CONTENT)
def update_course(
    course_id: int,
    data: CourseRequest | None = None,
    current_user: UserProfile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = data or CourseRequest()
    require_fields(data, COURSE_REQUIRED_FIELDS)

    course = get_course_or_404(course_id, db)
    if not is_course_owner(course, current_user):
        raise Forbidden('Only the creator of the course can update it.')

    course.title = data.title.strip()
    course.description = data.description.strip()
    if 'estimated_time' in data.model_fields_set:
        course.estimated_time = data.estimated_time
    if 'materials_needed' in data.model_fields_set:
        course.materials_needed = data.materials_needed
    db.commit()

    logger.info('User %s updated course %s', current_user.id, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete('/courses/{course_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    course_id: int,
    current_user: UserProfile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(course_id, db)
    if not is_course_owner(course, current_user):
        raise Forbidden('Only the creator of the course can delete it.')

    db.delete(course)
    db.commit()

    logger.info('User %s deleted course %s', current_user.id, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
