"""Password hashing with bcrypt."""
import bcrypt


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf8"), bcrypt.gensalt()).decode("utf8")


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf8"), stored_hash.encode("utf8"))
    except ValueError:
        # Not a bcrypt hash
        return False
