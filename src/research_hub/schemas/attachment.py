from pydantic import BaseModel


class AttachmentRead(BaseModel):
    """Result of a successful upload."""

    url: str
    file_name: str
    key: str
    size: int
