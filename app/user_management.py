"""
User credentials: password hashing and the login check.
"""
import logging

import bcrypt

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # malformed hash
        return False


def authenticate(repository, username: str, password: str):
    """
    Return the user when the username exists, the account is active and the
    password matches; otherwise None.
    """
    user = repository.get_user_by_username(username)
    if user is None:
        logger.info(f"Login failed: unknown username '{username}'")
        return None
    if not user.active:
        logger.info(f"Login failed: user '{username}' is inactive")
        return None
    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed: wrong password for '{username}'")
        return None

    logger.info(f"User '{username}' logged in")
    return user
