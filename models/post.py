from sqlalchemy import Column, String, Text

from models.base_model import BaseModel, Base


class Post(BaseModel, Base):
    __tablename__ = "posts"

    message = Column(Text, nullable=False)
    # Plain reference: deleting a user does not touch their posts
    user_id = Column(String(36), nullable=False, index=True)
