from sqlalchemy import Column, DateTime, Integer, String, func

from core.database import Base


class WordSuggestion(Base):
    __tablename__ = "word_suggestions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    word = Column(String(100), nullable=False, index=True)
    translation = Column(String(255), nullable=False)
    first_lang = Column(String(8), nullable=False, index=True)
    second_lang = Column(String(8), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
