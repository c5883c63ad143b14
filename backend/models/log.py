from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base


# Audit trail of sign-ins, registrations, setup and moderation actions.
# Rows outlive the acting account: user_id is cleared when the user is deleted.
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    action = Column(String(50), nullable=False, index=True)    # LOGIN, REGISTER, SUSPEND, VERIFY, ...
    resource = Column(String(50), nullable=False, index=True)  # auth, users, projects, config, ...
    status = Column(String(20), nullable=False, default="SUCCESS", index=True)  # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)  # target ids, e-mail used, failure key

    user = relationship("User", lazy="joined", uselist=False)

    @property
    def user_email(self):
        return self.user.email if self.user is not None else None
