import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_api.core import config, errors
from course_api.database import ensure_schema
from course_api.routes import course_routes, user_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    config.validate_runtime_config()
    try:
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.add_exception_handler(errors.CourseAPIError, errors.course_api_error_handler)
app.add_exception_handler(RequestValidationError, errors.request_validation_error_handler)
app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
app.add_exception_handler(SQLAlchemyError, errors.database_error_handler)
app.add_exception_handler(Exception, errors.unhandled_error_handler)


@app.get('/')
def root():
    return {'message': 'Welcome to the Course API'}


app.include_router(user_routes.router, prefix='/api')
app.include_router(course_routes.router, prefix='/api')
