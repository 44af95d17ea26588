from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from ..database import Base, new_id




class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(32), primary_key=True, default=new_id)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    author_id = Column(String(32), ForeignKey("users.id"), nullable=False)
    post_id = Column(String(32), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    author = relationship("User", foreign_keys=[author_id])
    post = relationship("Post", back_populates="comments")


    def __repr__(self):
        return f"<Comment by {self.author_id} on {self.post_id}>"
