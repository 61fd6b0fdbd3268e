from sqlalchemy import Column, Integer, String, UniqueConstraint

from core.database import Base


class DefaultSuggestion(Base):
    __tablename__ = "default_suggestions"
    __table_args__ = (
        UniqueConstraint("first_lang", "second_lang", "word", name="uq_default_suggestions_pair_word"),
    )

    id = Column(Integer, primary_key=True)
    word = Column(String(100), nullable=False, index=True)
    translation = Column(String(255), nullable=False)
    first_lang = Column(String(8), nullable=False, index=True)
    second_lang = Column(String(8), nullable=False, index=True)
