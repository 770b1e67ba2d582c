"""Initialize the database with academic reference data and the admin account."""

from datetime import date

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from authentication.auth import get_password_hash
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import (
    Department,
    Faculty,
    Profile,
    ProfileVisibility,
    User,
    UserRole,
    UserStatus,
)

ADMIN_SCAN_PLACEHOLDER = "ADMIN_DEFAULT"


def get_default_faculties() -> list[dict]:
    """Faculties and their departments seeded into an empty database.

    The first faculty and its first department get ID 1, which is what the
    default ADMIN_FACULTY_ID / ADMIN_DEPARTMENT_ID settings point at.
    """
    return [
        {
            "name": "Faculty of Engineering",
            "description": "Engineering programmes",
            "years_numbers": 5,
            "departments": [
                ("Computer and Control Engineering", "Computer systems and control"),
                ("Electrical Engineering", "Power and electronics"),
                ("Civil Engineering", "Structures and infrastructure"),
                ("Mechanical Engineering", "Machines and production"),
                ("Architecture Engineering", "Architectural design"),
            ],
        },
        {
            "name": "Faculty of Science",
            "description": "Natural and computational sciences",
            "years_numbers": 4,
            "departments": [
                ("Mathematics", "Pure and applied mathematics"),
                ("Physics", "Physics and astronomy"),
                ("Chemistry", "Chemistry and biochemistry"),
            ],
        },
        {
            "name": "Faculty of Commerce",
            "description": "Business and accounting",
            "years_numbers": 4,
            "departments": [
                ("Accounting", "Financial and managerial accounting"),
                ("Business Administration", "Management and marketing"),
            ],
        },
    ]


def seed_academics(db: Session) -> bool:
    """Insert default faculties and departments if none exist.

    Returns:
        True if anything was inserted.
    """
    if db.query(Faculty).first() is not None:
        return False

    for spec in get_default_faculties():
        faculty = Faculty(
            name=spec["name"],
            description=spec["description"],
            years_numbers=spec["years_numbers"],
        )
        faculty.departments = [
            Department(name=name, description=description)
            for name, description in spec["departments"]
        ]
        db.add(faculty)
    db.commit()
    logger.info("Default faculties and departments created")
    return True


def ensure_admin(db: Session) -> bool:
    """Create the bootstrap admin from settings if it does not exist yet.

    The admin is approved, pre-verified and has a PRIVATE profile.

    Returns:
        True if the admin was created.
    """
    admin_email = settings.ADMIN_EMAIL.lower()
    if db.query(User).filter(User.email == admin_email).first():
        return False

    faculty = db.get(Faculty, settings.ADMIN_FACULTY_ID)
    department = db.get(Department, settings.ADMIN_DEPARTMENT_ID)
    if faculty is None or department is None:
        logger.error("Cannot create admin user: faculty or department not found")
        return False

    admin = User(
        email=admin_email,
        hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        first_name=settings.ADMIN_FIRST_NAME,
        last_name=settings.ADMIN_LAST_NAME,
        birth_date=date(2000, 1, 1),
        national_id=settings.ADMIN_NATIONAL_ID,
        national_id_scan=ADMIN_SCAN_PLACEHOLDER,
        role=UserRole.ADMIN,
        status=UserStatus.APPROVED,
        email_verified=True,
        year=1,
        faculty_id=faculty.id,
        department_id=department.id,
    )
    admin.profile = Profile(
        bio="System Administrator", visibility=ProfileVisibility.PRIVATE
    )
    db.add(admin)
    db.commit()
    logger.info(f"Admin user created: {settings.ADMIN_EMAIL}")
    return True


def init_db(create_tables: bool = True) -> None:
    """Seed reference data and the admin account."""
    if create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_academics(db)
        ensure_admin(db)
        logger.info("Database initialization complete")
    except SQLAlchemyError as e:
        logger.error(f"Error initializing database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
