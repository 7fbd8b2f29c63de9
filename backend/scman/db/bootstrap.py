import logging
from sqlalchemy.orm import Session
from scman.core.config import settings
from scman.models.user import User
from scman.utils.crypto import hash_password

logger = logging.getLogger(__name__)

def ensure_admin(db: Session):
    """
    Create the administrator account from ADMIN_USERNAME / ADMIN_PASSWORD
    when both are set and no user holds that username yet.
    Returns the created user, or None.
    """
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return None

    existing = db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
    if existing:
        return None

    admin = User(
        username=settings.ADMIN_USERNAME,
        full_name=settings.ADMIN_FULL_NAME,
        passhash=hash_password(settings.ADMIN_PASSWORD),
        role="admin",
        active=True
    )
    db.add(admin)
    db.commit()
    logger.info(f"👤 Created bootstrap admin {admin.username}")
    return admin
