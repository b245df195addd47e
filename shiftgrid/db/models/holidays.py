from sqlalchemy import Integer, String, Date
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date
from shiftgrid.db.database import Base


class Holidays(Base):
    __tablename__ = "holidays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    day_date: Mapped[date] = mapped_column(Date, nullable=False, unique=True, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
