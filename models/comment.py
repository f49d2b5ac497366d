from sqlalchemy import Column, String, Text

from models.base_model import BaseModel, Base


class Comment(BaseModel, Base):
    __tablename__ = "comments"

    post_id = Column(String(36), nullable=False, index=True)
    sender = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
