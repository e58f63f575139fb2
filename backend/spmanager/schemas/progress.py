# spmanager/schemas/progress.py
from pydantic import BaseModel


class SaveProgressResponse(BaseModel):
    success: bool = True
    message: str = "Progress saved"
