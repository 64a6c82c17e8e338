from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z


STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
VALID_STATUSES = {STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED}

TYPE_EXPIRED = "expired"
TYPE_DAMAGED = "damaged"
VALID_TYPES = {TYPE_EXPIRED, TYPE_DAMAGED}


class ProductStatusReport(db.Model):
    """
    Expired or damaged product report raised by staff and reviewed by an admin.

    LIFECYCLE:
    - pending: submitted (or resubmitted after a revision), awaiting review
    - approved: admin accepted it; the linked stock lot was decremented
    - rejected: admin refused it; the reporter may revise and resubmit

    Revisions append the rejected version to `revisions` and return the
    report to pending. The revision list is append-only.
    """
    __tablename__ = "product_status_reports"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_product_status_quantity_positive"),
        db.CheckConstraint("type IN ('expired', 'damaged')", name="ck_product_status_type"),
        db.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_product_status_status"),
        db.Index("ix_product_status_type_status", "type", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    stock_id = db.Column(db.Integer, db.ForeignKey("stocks.id"), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    type = db.Column(db.String(16), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    notes = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING, index=True)

    reported_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    reported_by_username = db.Column(db.String(64), nullable=False)
    reported_at = db.Column(db.DateTime(timezone=True), nullable=False)

    reviewed_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_by_username = db.Column(db.String(64), nullable=True)
    reviewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    review_notes = db.Column(db.Text, nullable=True)

    edited_at = db.Column(db.DateTime(timezone=True), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    stock = db.relationship("Stock", backref=db.backref("status_reports", lazy=True))
    revisions = db.relationship(
        "ProductStatusRevision",
        backref="report",
        lazy=True,
        order_by="ProductStatusRevision.sequence",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<ProductStatusReport id={self.id} type={self.type} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "stock_id": self.stock_id,
            "product_name": self.product_name,
            "type": self.type,
            "quantity": self.quantity,
            "notes": self.notes,
            "image_url": self.image_url,
            "status": self.status,
            "reported_by_user_id": self.reported_by_user_id,
            "reported_by_username": self.reported_by_username,
            "reported_at": to_utc_z(self.reported_at),
            "reviewed_by_user_id": self.reviewed_by_user_id,
            "reviewed_by_username": self.reviewed_by_username,
            "reviewed_at": to_utc_z(self.reviewed_at),
            "review_notes": self.review_notes,
            "edited_at": to_utc_z(self.edited_at),
            "previous_reports": [r.to_dict() for r in self.revisions],
            "version_id": self.version_id,
        }


class ProductStatusRevision(db.Model):
    """
    Snapshot of a rejected report taken just before the reporter edited it.

    IMMUTABLE: rows are only ever inserted.
    """
    __tablename__ = "product_status_revisions"
    __table_args__ = (
        db.UniqueConstraint("report_id", "sequence", name="uq_product_status_revision_seq"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    report_id = db.Column(db.Integer, db.ForeignKey("product_status_reports.id"), nullable=False, index=True)

    # 1-based position in the report's history
    sequence = db.Column(db.Integer, nullable=False)

    notes = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.Text, nullable=True)
    review_notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(16), nullable=False, default=STATUS_REJECTED)

    recorded_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "sequence": self.sequence,
            "notes": self.notes,
            "image_url": self.image_url,
            "review_notes": self.review_notes,
            "status": self.status,
            "timestamp": to_utc_z(self.recorded_at),
        }
