from sqlalchemy import JSON, Column, DateTime, Integer, String, func

from core.database import Base


class PromptReport(Base):
    __tablename__ = "prompt_reports"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    first_lang = Column(String(8), nullable=False)
    second_lang = Column(String(8), nullable=False)
    words_added = Column(Integer, nullable=False, default=0)
    prompt_tokens = Column(Integer, nullable=True)
    completion_tokens = Column(Integer, nullable=True)
    total_tokens = Column(Integer, nullable=True)
    model = Column(String(64), nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
