import hashlib
from passlib.context import CryptContext
from starlette.requests import HTTPConnection
from relay.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(p: str) -> str:
    return pwd_context.hash(p)

def verify_password(p: str, hashed: str) -> bool:
    return pwd_context.verify(p, hashed)

def client_ip(conn: HTTPConnection) -> str:
    forwarded = conn.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return conn.client.host if conn.client else ""

def hash_origin(ip: str, salt: str | None = None) -> str:
    """Stable profile key for a network origin; the raw address is never stored."""
    salt = settings.IP_SALT if salt is None else salt
    return hashlib.sha256(f"{ip or ''}::{salt}".encode()).hexdigest()
