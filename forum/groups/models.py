from sqlalchemy import Column, String, DateTime, Table, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from ..database import Base, new_id



def _group_user_table(name: str) -> Table:
    return Table(
        name,
        Base.metadata,
        Column("group_id", String(32), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
        Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )


# one table per set; the composite key keeps each set free of duplicates
group_members = _group_user_table("group_members")
group_mods = _group_user_table("group_mods")
group_bans = _group_user_table("group_bans")




class Group(Base):
    __tablename__ = "groups"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(String(255), nullable=False)
    admin_id = Column(String(32), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    admin = relationship("User", foreign_keys=[admin_id])
    members = relationship("User", secondary=group_members)
    mods = relationship("User", secondary=group_mods)
    banned = relationship("User", secondary=group_bans)



    def __repr__(self):
        return f"<Group '{self.name}' ({self.id})>"


    @property
    def member_ids(self):
        return {user.id for user in self.members}


    @property
    def mod_ids(self):
        return {user.id for user in self.mods}


    @property
    def banned_ids(self):
        return {user.id for user in self.banned}
