from sqlalchemy import Column, Integer, String

from app.models.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    # FileRecord.owner_id holds str(User.id); there is no ORM relationship
