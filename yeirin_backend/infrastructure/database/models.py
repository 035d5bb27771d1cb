"""Database ORM models.

상담의뢰지, 상담의뢰지 추천, 면담결과지 테이블을 정의합니다.
각 애그리거트 테이블은 낙관적 동시성 제어를 위한 ``version`` 컬럼을 가집니다.
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from yeirin_backend.domain.counsel_report.status import ReportStatus
from yeirin_backend.domain.counsel_request.enums import (
    CareType,
    CounselRequestStatus,
    IntegratedReportStatus,
)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# 상담의뢰지
# =============================================================================


class CounselRequestORM(Base):
    """상담의뢰지 ORM 모델."""

    __tablename__ = "counsel_requests"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    child_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), nullable=False, index=True, comment="아동 ID"
    )
    guardian_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True, index=True, comment="보호자 ID"
    )
    status: Mapped[CounselRequestStatus] = mapped_column(
        Enum(CounselRequestStatus, native_enum=False, length=20),
        nullable=False,
        index=True,
        comment="상담의뢰 상태",
    )
    form_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, comment="상담의뢰지 양식 데이터"
    )

    # 검색용 비정규화 필드
    center_name: Mapped[str] = mapped_column(String(100), nullable=False)
    care_type: Mapped[CareType] = mapped_column(
        Enum(CareType, native_enum=False, length=20), nullable=False
    )
    request_date: Mapped[date] = mapped_column(Date, nullable=False)

    matched_institution_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True, index=True
    )
    matched_counselor_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True, index=True
    )

    integrated_report_s3_key: Mapped[str | None] = mapped_column(
        String(500), nullable=True, comment="통합 보고서 S3 key"
    )
    integrated_report_status: Mapped[IntegratedReportStatus | None] = mapped_column(
        Enum(
            IntegratedReportStatus,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
        comment="통합 보고서 생성 상태",
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# =============================================================================
# 상담의뢰지 추천
# =============================================================================


class CounselRequestRecommendationORM(Base):
    """상담의뢰지 추천 ORM 모델."""

    __tablename__ = "counsel_request_recommendations"
    __table_args__ = (
        # 상담의뢰지당 선택된 추천은 최대 1개
        Index(
            "uq_counsel_request_recommendations_selected",
            "counsel_request_id",
            unique=True,
            postgresql_where=text("selected"),
        ),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    counsel_request_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("counsel_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    institution_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False, comment="추천 점수 (0-1)")
    reason: Mapped[str] = mapped_column(Text, nullable=False, comment="추천 이유")
    rank: Mapped[int] = mapped_column(Integer, nullable=False, comment="순위 (1-5)")
    selected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# =============================================================================
# 면담결과지
# =============================================================================


class CounselReportORM(Base):
    """면담결과지 ORM 모델."""

    __tablename__ = "counsel_reports"
    __table_args__ = (
        UniqueConstraint(
            "counsel_request_id",
            "session_number",
            name="uq_counsel_reports_request_session",
        ),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    counsel_request_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("counsel_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    child_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    counselor_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True, index=True
    )
    institution_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), nullable=True, index=True
    )
    session_number: Mapped[int] = mapped_column(Integer, nullable=False, comment="회차")
    report_date: Mapped[date] = mapped_column(Date, nullable=False)
    center_name: Mapped[str] = mapped_column(String(100), nullable=False)
    counselor_signature: Mapped[str | None] = mapped_column(String(500), nullable=True)
    counsel_reason: Mapped[str] = mapped_column(Text, nullable=False)
    counsel_content: Mapped[str] = mapped_column(Text, nullable=False)
    center_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    home_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachment_urls: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, default=list
    )
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, native_enum=False, length=20),
        nullable=False,
        index=True,
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    guardian_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
