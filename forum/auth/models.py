from sqlalchemy import Column, String, DateTime, Text, Table, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from ..database import Base, new_id



# one row per edge: follower -> followed. both sides of the graph read it
user_follows = Table(
    "user_follows",
    Base.metadata,
    Column("follower_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("followed_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)



class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    bio = Column(Text)
    avatar = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, default=datetime.utcnow)


    following = relationship(
        "User",
        secondary=user_follows,
        primaryjoin=id == user_follows.c.follower_id,
        secondaryjoin=id == user_follows.c.followed_id,
        back_populates="followers",
    )
    followers = relationship(
        "User",
        secondary=user_follows,
        primaryjoin=id == user_follows.c.followed_id,
        secondaryjoin=id == user_follows.c.follower_id,
        back_populates="following",
    )



    def __repr__(self):
        return f"<User {self.username} ({self.id})>"


    @property
    def following_ids(self):
        return [user.id for user in self.following]


    @property
    def follower_ids(self):
        return [user.id for user in self.followers]
