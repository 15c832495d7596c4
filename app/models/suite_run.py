from sqlalchemy import String, DateTime, Integer, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base, now_utc
from datetime import datetime
import enum


class SuiteRunStatus(str, enum.Enum):
    RUNNING = "running"
    SUCCESS = "success"  # wszystkie scenariusze ok
    FAILED = "failed"    # zaden scenariusz nie przeszedl
    PARTIAL = "partial"  # czesc scenariuszy failed
    CANCELLED = "cancelled"


class SuiteRun(Base):
    """
    Pojedyncze uruchomienie zestawu scenariuszy na jednym sklepie.
    Agreguje wiele scenario_runs.
    """
    __tablename__ = "suite_runs"

    id: Mapped[int] = mapped_column(primary_key=True)
    base_url: Mapped[str] = mapped_column(String(500), nullable=False)

    status: Mapped[SuiteRunStatus] = mapped_column(
        Enum(SuiteRunStatus), default=SuiteRunStatus.RUNNING, nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    triggered_by: Mapped[str] = mapped_column(String(50), default="manual")

    # Statystyki
    total_scenarios: Mapped[int] = mapped_column(Integer, default=0)
    success_scenarios: Mapped[int] = mapped_column(Integer, default=0)
    failed_scenarios: Mapped[int] = mapped_column(Integer, default=0)

    # Relacje
    scenario_runs: Mapped[list["ScenarioRun"]] = relationship(
        back_populates="suite_run", cascade="all, delete-orphan"
    )

    @property
    def duration_seconds(self) -> int | None:
        if self.finished_at and self.started_at:
            return int((self.finished_at - self.started_at).total_seconds())
        return None

    def __repr__(self) -> str:
        return f"<SuiteRun id={self.id} base_url={self.base_url} status={self.status}>"
