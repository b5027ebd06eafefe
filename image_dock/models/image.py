"""
Image record model for cataloging uploaded objects.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from .base import Base


class ImageRecord(Base):
    """
    Metadata row for one uploaded image.

    The object bytes live in the bucket under ``s3_key``; this row only
    describes them. Rows are written once and never updated.

    Attributes:
        id: Unique identifier generated by the database
        filename: Original client-supplied filename (unvalidated)
        s3_key: Sanitized, prefixed object key
        s3_bucket: Bucket the object was written to
        url: Public URL of the object
        uploaded_at: Insert timestamp assigned by the database
        category: Caller-supplied category
        sub_category: Caller-supplied sub-category
        name: Caller-supplied display name
    """

    __tablename__ = "images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    s3_key = Column(String(500), nullable=False)
    s3_bucket = Column(String(255), nullable=False)
    url = Column(Text, nullable=True)
    uploaded_at = Column(DateTime, server_default=func.now())
    category = Column(String(200), nullable=False)
    sub_category = Column(String(200), nullable=False)
    name = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<ImageRecord(id={self.id}, s3_key='{self.s3_key}')>"
