"""Password hashing utilities.

Only hashes ever reach storage.  Token issuance and credential checks belong
to the external authentication collaborator.
"""

from passlib.context import CryptContext

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)
