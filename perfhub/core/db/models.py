"""
Database Models — PerformanceHub tables read by the export service.

Tables:
- user_profiles: Employees, with a self-referencing manager link
- goals: Goals assigned to a user, optionally overseen by a manager
- performance_reviews: Reviews linking a reviewee and a reviewer
- feedback: Peer feedback between two users

The schema is owned by the product database (Supabase); these mappings cover
only the columns the exports read.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from perfhub.core.db.postgres import Base


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserProfile(Base):
    """Employee profile."""
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(50), nullable=False, default="employee", index=True)
    department = Column(String(100), nullable=True, index=True)
    position = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    location = Column(String(100), nullable=True)
    hire_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    manager_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    manager = relationship("UserProfile", remote_side=[id], foreign_keys=[manager_id])

    def __repr__(self):
        return f"<UserProfile(id={self.id}, email={self.email})>"


class Goal(Base):
    """Goal assigned to an employee."""
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=False, default="draft", index=True)
    # Status values: draft, active, completed, cancelled
    priority = Column(String(20), nullable=True)
    goal_type = Column(String(50), nullable=True)
    progress = Column(Integer, nullable=True)
    due_date = Column(Date, nullable=True)
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)
    manager_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    assignee = relationship("UserProfile", foreign_keys=[user_id])
    manager = relationship("UserProfile", foreign_keys=[manager_id])

    __table_args__ = (
        Index("idx_goals_status_created", "status", "created_at"),
    )

    def __repr__(self):
        return f"<Goal(id={self.id}, status={self.status})>"


class PerformanceReview(Base):
    """Performance review of one employee by another."""
    __tablename__ = "performance_reviews"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    review_type = Column(String(50), nullable=True)
    status = Column(String(50), nullable=False, default="draft", index=True)
    review_period = Column(String(100), nullable=True)
    overall_rating = Column(Float, nullable=True)
    strengths = Column(Text, nullable=True)
    areas_for_improvement = Column(Text, nullable=True)
    goals_for_next_period = Column(Text, nullable=True)
    reviewee_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)
    reviewer_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    reviewee = relationship("UserProfile", foreign_keys=[reviewee_id])
    reviewer = relationship("UserProfile", foreign_keys=[reviewer_id])

    def __repr__(self):
        return f"<PerformanceReview(id={self.id}, status={self.status})>"


class Feedback(Base):
    """Feedback given by one employee to another."""
    __tablename__ = "feedback"

    id = Column(String(36), primary_key=True)
    feedback_type = Column(String(50), nullable=True, index=True)
    content = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    feedback_giver_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)
    feedback_receiver_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)

    feedback_giver = relationship("UserProfile", foreign_keys=[feedback_giver_id])
    feedback_receiver = relationship("UserProfile", foreign_keys=[feedback_receiver_id])

    def __repr__(self):
        return f"<Feedback(id={self.id}, type={self.feedback_type})>"
