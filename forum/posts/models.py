from sqlalchemy import Column, String, DateTime, Text, Table, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from ..database import Base, new_id



post_likes = Table(
    "post_likes",
    Base.metadata,
    Column("post_id", String(32), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)




class Post(Base):
    __tablename__ = "posts"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    text = Column(Text, nullable=False)
    image = Column(String(500))
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    author_id = Column(String(32), ForeignKey("users.id"), nullable=False)
    group_id = Column(String(32), ForeignKey("groups.id"), nullable=False, index=True)

    author = relationship("User", foreign_keys=[author_id])
    group = relationship("Group", foreign_keys=[group_id])
    likes = relationship("User", secondary=post_likes)
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")



    def __repr__(self):
        return f"<Post '{self.title}' ({self.id})>"


    @property
    def like_ids(self):
        return {user.id for user in self.likes}
