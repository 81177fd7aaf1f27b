from gradetrack.db.base_class import Base
from gradetrack.db.session import engine

# import models so SQLAlchemy registers them
from gradetrack.models import blob  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
