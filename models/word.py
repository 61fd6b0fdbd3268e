from sqlalchemy import Column, DateTime, Integer, String, func

from core.database import Base


class Word(Base):
    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    text = Column(String(100), nullable=False, index=True)
    translation = Column(String(255), nullable=True)
    first_lang = Column(String(8), nullable=False, index=True)
    second_lang = Column(String(8), nullable=False, index=True)
    add_date = Column(DateTime, nullable=True, server_default=func.now())
