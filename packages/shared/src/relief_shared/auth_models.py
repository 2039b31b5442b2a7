"""Identity of an authenticated caller of the function boundary."""

from pydantic import BaseModel


class Caller(BaseModel):
    """Claims we rely on from a Supabase access token."""

    user_id: str
    role: str = "anon"
    email: str = ""
    exp: int
